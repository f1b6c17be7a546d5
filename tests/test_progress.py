"""Tests for the per-clause progress heuristics."""

import pytest

from achievements.progress import clause_progress, metric_label


@pytest.mark.parametrize(
    "current,op,threshold,expected",
    [
        (5, ">=", 10, 0.5),
        (10, ">=", 10, 1.0),
        (0, ">=", 0, 1.0),
        (3, ">", 5, 0.5),
        (6, ">", 5, 1.0),
        (3, "<=", 0, 0.0),
        (4, "<=", 2, 0.5),
        (4, "<", 3, 0.5),
        (4, "<", 1, 0.0),
        (2, "==", 4, 0.5),
        (8, "==", 4, 0.5),
        (3, "==", 0, 0.0),
        (0, "==", 0, 1.0),
        (0, "==", -1, 0.0),
        (3, "!=", 3, 0.0),
        (2, "!=", 3, 1.0),
    ],
)
def test_clause_progress(current, op, threshold, expected):
    assert clause_progress(current, op, threshold) == pytest.approx(expected)


def test_progress_is_clamped():
    assert clause_progress(0, ">=", -5) == 1.0
    assert clause_progress(-10, ">=", 5) == 0.0
    assert clause_progress(-5, ">", -3) == 0.0


def test_metric_labels():
    assert metric_label("wins") == "Wins"
    assert metric_label("dnf") == "DNF"
    assert metric_label("action:default_vehicle_set_space") == "Default space vehicle set"
    assert metric_label("action:map-saved_twice") == "Map Saved Twice"
    assert metric_label("laps") == "laps"
