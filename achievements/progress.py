# achievements/progress.py
#
# UI-only "how close" estimates. Never used to decide unlocking.

import math

from .metrics import ACTION_PREFIX
from .registry import compare

ACTION_LABELS = {
    "default_vehicle_set": "Default vehicle sets",
    "default_vehicle_set_ground": "Default ground vehicle set",
    "default_vehicle_set_resort": "Default resort vehicle set",
    "default_vehicle_set_space": "Default space vehicle set",
}

BASE_LABELS = {
    "wins": "Wins",
    "races": "Races",
    "finished": "Finished",
    "dnf": "DNF",
}


def clamp01(x) -> float:
    try:
        n = float(x)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(n):
        return 0.0
    return max(0.0, min(1.0, n))


def clause_progress(current, op: str, threshold) -> float:
    if compare(current, op, threshold):
        return 1.0

    if op == ">=":
        if threshold == 0:
            return 1.0 if current > 0 else 0.0
        return clamp01(current / threshold)

    if op == ">":
        # integer counters: "> N" means N+1 in practice
        target = threshold + 1
        if target <= 0:
            return 0.0
        return clamp01(current / target)

    if op == "<=":
        if threshold <= 0 or current <= 0:
            return 0.0
        return clamp01(threshold / current)

    if op == "<":
        target = threshold - 1
        if target <= 0 or current <= 0:
            return 0.0
        return clamp01(target / current)

    if op == "==":
        if threshold == 0:
            return 1.0 if current == 0 else 0.0
        if current < threshold:
            return clamp01(current / threshold)
        if current > threshold:
            if current == 0:
                return 0.0
            return clamp01(threshold / current)
        return 1.0

    if op == "!=":
        return 1.0 if current != threshold else 0.0

    return 0.0


def metric_label(canonical: str) -> str:
    m = str(canonical or "").strip()
    if not m:
        return ""

    if m.startswith(ACTION_PREFIX):
        key = m[len(ACTION_PREFIX):]
        if key in ACTION_LABELS:
            return ACTION_LABELS[key]
        parts = [p for p in key.replace("-", "_").split("_") if p]
        return " ".join(p[:1].upper() + p[1:] for p in parts)

    return BASE_LABELS.get(m, m)
