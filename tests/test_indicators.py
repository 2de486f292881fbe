import pytest

from marketstate.core.indicators import atr_series, next_atr, true_range


def test_true_range_uses_gap_from_previous_close() -> None:
    assert true_range(12.0, 9.0, None) == 3.0
    assert true_range(12.0, 11.0, 9.0) == 3.0
    assert true_range(10.0, 8.0, 13.0) == 5.0


def test_atr_warm_up_then_wilder() -> None:
    highs = [10.0, 12.0, 11.0, 13.0]
    lows = [8.0, 9.0, 9.0, 10.0]
    closes = [9.0, 11.0, 10.0, 12.0]
    # true ranges: 2, 3, 2, 3
    out = atr_series(highs, lows, closes, period=3)
    assert out == pytest.approx([2.0, 2.5, 7.0 / 3.0, 23.0 / 9.0])


def test_next_atr_first_bar_is_true_range() -> None:
    assert next_atr(None, 4.0, 0) == 4.0


def test_atr_period_must_be_positive() -> None:
    with pytest.raises(ValueError):
        atr_series([1.0], [0.5], [0.7], period=0)
