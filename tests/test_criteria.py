"""Tests for criteria parsing and clause evaluation."""

import pytest

from achievements.criteria import (
    Clause,
    criteria_satisfied,
    parse_criteria,
    referenced_action_keys,
    unknown_metrics,
)
from achievements.errors import CriteriaRequired, InvalidCriteria
from achievements.metrics import MetricSnapshot


def test_single_clause():
    assert parse_criteria("wins>=1") == [Clause(metric="wins", op=">=", threshold=1)]


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
def test_empty_criteria_is_required(text):
    with pytest.raises(CriteriaRequired):
        parse_criteria(text)


def test_double_operator_is_invalid():
    with pytest.raises(InvalidCriteria) as exc:
        parse_criteria("wins>>1")
    assert '"wins>>1"' in exc.value.message


def test_offending_line_is_reported_verbatim():
    with pytest.raises(InvalidCriteria) as exc:
        parse_criteria("wins>=1\nraces at least 5")
    assert '"races at least 5"' in exc.value.message


def test_separators_comments_and_whitespace():
    clauses = parse_criteria("# header\r\n  Wins >= 1 ;\n// note\n\nraces>5;;dnf<=0")
    assert [(c.metric, c.op, c.threshold) for c in clauses] == [
        ("wins", ">=", 1),
        ("races", ">", 5),
        ("dnf", "<=", 0),
    ]


def test_only_comments_has_no_valid_clauses():
    with pytest.raises(InvalidCriteria) as exc:
        parse_criteria("# nothing here\n// still nothing")
    assert "no valid clauses" in exc.value.message


def test_bare_equals_folds_to_double_equals():
    assert parse_criteria("wins=3")[0].op == "=="


def test_signed_and_decimal_thresholds():
    clauses = parse_criteria("wins>-1; races>=+2; finished<2.5")
    assert [c.threshold for c in clauses] == [-1, 2, 2.5]
    assert isinstance(clauses[2].threshold, float)


def test_metric_may_not_start_with_digit():
    with pytest.raises(InvalidCriteria):
        parse_criteria("1wins>=1")


def test_namespaced_metric_keeps_separators():
    assert parse_criteria("Action:Default_Vehicle_Set>=2")[0].metric == "action:default_vehicle_set"


def test_and_of_clauses():
    clauses = parse_criteria("wins>=1;races>=5")
    assert criteria_satisfied(clauses, MetricSnapshot(wins=2, races=10))
    assert not criteria_satisfied(clauses, MetricSnapshot(wins=0, races=10))


@pytest.mark.parametrize(
    "criteria,expected",
    [
        ("wins>2", False),
        ("wins>1", True),
        ("wins<2", False),
        ("wins<=2", True),
        ("wins==2", True),
        ("wins!=2", False),
        ("wins=2.5", False),
    ],
)
def test_operators(criteria, expected):
    assert criteria_satisfied(parse_criteria(criteria), MetricSnapshot(wins=2)) is expected


def test_action_and_alias_lookup():
    snapshot = MetricSnapshot(races=4, actions={"default_vehicle_set": 3})
    assert criteria_satisfied(parse_criteria("competitions>=4;defaultVehicleSets>=3"), snapshot)
    assert not criteria_satisfied(parse_criteria("action.default_vehicle_set>=4"), snapshot)


def test_unknown_metric_evaluates_as_zero():
    clauses = parse_criteria("podiums>=1")
    assert not criteria_satisfied(clauses, MetricSnapshot(wins=5))
    assert criteria_satisfied(parse_criteria("podiums==0"), MetricSnapshot())
    assert unknown_metrics(clauses) == ["podiums"]


def test_referenced_action_keys():
    clauses = parse_criteria("wins>=1;action_jump>=1;action.jump>=2;defaultvehicleset>=1")
    assert referenced_action_keys(clauses) == {"jump", "default_vehicle_set"}
