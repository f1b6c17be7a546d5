# achievements/metrics.py

from dataclasses import dataclass, field
from typing import Dict

ACTION_PREFIX = "action:"

BASE_METRICS = ("races", "finished", "wins", "dnf")

# ------------------------------------------
# Friendly spellings accepted in criteria text
# ------------------------------------------
METRIC_ALIASES = {
    "win": "wins",
    "wins": "wins",

    "race": "races",
    "races": "races",
    "competitions": "races",

    "finish": "finished",
    "finishes": "finished",
    "finished": "finished",

    "dnf": "dnf",
    "dnfs": "dnf",

    "defaultvehicleset": "action:default_vehicle_set",
    "defaultvehiclesets": "action:default_vehicle_set",
    "website_default_vehicle_set": "action:default_vehicle_set",
    "webdefaultvehiclesets": "action:default_vehicle_set",
}


@dataclass
class MetricSnapshot:
    races: int = 0
    finished: int = 0
    wins: int = 0
    dnf: int = 0
    actions: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "races": self.races,
            "finished": self.finished,
            "wins": self.wins,
            "dnf": self.dnf,
            "actions": dict(self.actions),
        }


@dataclass(frozen=True)
class MetricRef:
    """Resolved metric: either a base race field or an action counter key."""

    kind: str
    name: str

    @property
    def is_action(self) -> bool:
        return self.kind == "action"

    @property
    def is_known(self) -> bool:
        return self.is_action or self.name in BASE_METRICS

    @property
    def canonical(self) -> str:
        return ACTION_PREFIX + self.name if self.is_action else self.name

    def value_from(self, snapshot: MetricSnapshot):
        if self.is_action:
            return snapshot.actions.get(self.name, 0) or 0
        if self.name in BASE_METRICS:
            return getattr(snapshot, self.name) or 0
        # unknown metric names evaluate as zero
        return 0


def normalize_metric(name: str) -> str:
    s = str(name or "").strip().lower()
    if not s:
        return ""

    if s.startswith("action:"):
        return s
    if s.startswith("action."):
        return ACTION_PREFIX + s[len("action."):]
    if s.startswith("action_"):
        return ACTION_PREFIX + s[len("action_"):]

    return METRIC_ALIASES.get(s, s)


def metric_ref(name: str) -> MetricRef:
    canonical = normalize_metric(name)
    if canonical.startswith(ACTION_PREFIX):
        return MetricRef("action", canonical[len(ACTION_PREFIX):])
    return MetricRef("base", canonical)
