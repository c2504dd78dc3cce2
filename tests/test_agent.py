import pytest

from quantdesk.agent import Signal, hold_from_score, signals_from_scores


@pytest.mark.parametrize(
    "score, expected",
    [(0.9, 1), (0.75, 0), (0.5, 0), (0.25, 0), (0.1, -1)],
)
def test_hold_from_score(score, expected):
    assert hold_from_score(score) == expected


def test_signals_keep_order():
    result = signals_from_scores(["a", "b", "c"], [0.8, 0.5, 0.2])
    assert result == [Signal("a", 1), Signal("b", 0), Signal("c", -1)]


def test_signals_empty():
    assert signals_from_scores([], []) == []


def test_length_mismatch_rejected():
    with pytest.raises(ValueError):
        signals_from_scores(["a", "b"], [0.9])