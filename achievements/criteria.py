# achievements/criteria.py
#
# Criteria DSL: one clause per line (or separated by ';'), all clauses ANDed.
#
#     wins>=1
#     races >= 10; dnf <= 0
#     # comment lines start with '#' or '//'
#

import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Union

from .errors import CriteriaRequired, InvalidCriteria
from .metrics import MetricRef, MetricSnapshot, metric_ref
from .registry import compare

CLAUSE_RE = re.compile(
    r"^([A-Za-z_][A-Za-z0-9_.:-]*)\s*(>=|<=|==|!=|>|<|=)\s*([-+]?\d+(?:\.\d+)?)$"
)

SEPARATORS_RE = re.compile(r"[\n;]")


@dataclass(frozen=True)
class Clause:
    metric: str
    op: str
    threshold: Union[int, float]

    @property
    def ref(self) -> MetricRef:
        return metric_ref(self.metric)

    def current(self, snapshot: MetricSnapshot):
        return self.ref.value_from(snapshot)

    def holds(self, snapshot: MetricSnapshot) -> bool:
        return compare(self.current(snapshot), self.op, self.threshold)


def _parse_number(raw: str):
    try:
        value = float(raw)
    except ValueError:
        raise InvalidCriteria(f"Criteria value is not a number: {raw}")

    if not math.isfinite(value):
        raise InvalidCriteria(f"Criteria value is not a number: {raw}")

    if "." not in raw:
        return int(raw)
    return value


def parse_criteria(text: str) -> List[Clause]:
    text = str(text or "").strip()
    if not text:
        raise CriteriaRequired("Criteria is required.")

    segments = [s.strip() for s in SEPARATORS_RE.split(text.replace("\r", ""))]

    clauses = []
    for line in segments:
        if not line or line.startswith("#") or line.startswith("//"):
            continue

        m = CLAUSE_RE.match(line)
        if not m:
            raise InvalidCriteria(
                f'Invalid criteria line: "{line}". Expected format like wins>=1'
            )

        metric = m.group(1).lower()
        op = "==" if m.group(2) == "=" else m.group(2)
        threshold = _parse_number(m.group(3))

        clauses.append(Clause(metric=metric, op=op, threshold=threshold))

    if not clauses:
        raise InvalidCriteria("Criteria contains no valid clauses.")

    return clauses


def criteria_satisfied(clauses: Iterable[Clause], snapshot: MetricSnapshot) -> bool:
    return all(clause.holds(snapshot) for clause in clauses)


def referenced_action_keys(clauses: Iterable[Clause]) -> set:
    keys = set()
    for clause in clauses:
        ref = clause.ref
        if ref.is_action and ref.name:
            keys.add(ref.name)
    return keys


def unknown_metrics(clauses: Iterable[Clause]) -> List[str]:
    """Metric names that resolve to neither a race field nor an action counter."""
    out = []
    for clause in clauses:
        ref = clause.ref
        if not ref.is_known and ref.canonical not in out:
            out.append(ref.canonical)
    return out
