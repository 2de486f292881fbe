import logging

import pytest

from marketstate.core.annotations import AnnotationBoard
from marketstate.core.bars import Bar
from marketstate.core.config import ConfigError, MarketStateConfig
from marketstate.core.indicator import MarketStateIndicator, evaluate
from marketstate.core.indicators import atr_series
from marketstate.core.state import MarketState


def _cfg(**kw) -> MarketStateConfig:
    base = dict(lookback_period=2, range_threshold=0.5, atr_period=1)
    base.update(kw)
    return MarketStateConfig(**base)


def test_idle_until_lookback_plus_one_bars() -> None:
    ind = MarketStateIndicator(MarketStateConfig(lookback_period=20))
    flat = Bar(high=101.0, low=99.0, close=100.0)

    out = ind.run([flat] * 15)
    assert out == [None] * 15
    assert ind.last_result is None
    assert ind.state is None
    assert len(ind.sink) == 0

    out = ind.run([flat] * 6)
    assert out[:5] == [None] * 5
    assert out[5] is not None
    assert ind.current_bar == 20
    assert ind.values == [None] * 20 + [1]


def test_trend_markers_leak_with_legacy_cleanup(trend_then_range_bars) -> None:
    ind = MarketStateIndicator(_cfg())
    results = ind.run(trend_then_range_bars)

    assert ind.values == [None, None, 1, 0]
    assert results[2].state == MarketState.UP_TREND
    assert results[2].status_text == "Up Trend: HL 94.00"
    assert results[3].state == MarketState.RANGING
    assert (results[3].rolling.range_high, results[3].rolling.range_low) == (99.0, 96.0)

    assert sorted(ind.sink.names()) == ["HigherLow1", "RangeHigh", "RangeLow", "StateText"]
    assert ind.sink.status_text == "Ranging: High 99.00, Low 96.00"


def test_fixed_cleanup_removes_trend_markers(trend_then_range_bars) -> None:
    board = AnnotationBoard()
    ind = MarketStateIndicator(_cfg(legacy_cleanup=False), sink=board)
    ind.run(trend_then_range_bars)

    assert ind.sink is board
    assert sorted(board.names()) == ["RangeHigh", "RangeLow", "StateText"]


def test_running_atr_matches_series(trend_then_range_bars) -> None:
    ind = MarketStateIndicator(MarketStateConfig(lookback_period=2, atr_period=14))
    ind.run(trend_then_range_bars)
    highs = [b.high for b in trend_then_range_bars]
    lows = [b.low for b in trend_then_range_bars]
    closes = [b.close for b in trend_then_range_bars]
    assert ind.atr == pytest.approx(atr_series(highs, lows, closes, 14)[-1])
    assert ind.atr == pytest.approx(4.0)


def test_state_change_is_logged(trend_then_range_bars, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="marketstate.core.indicator"):
        evaluate(trend_then_range_bars, _cfg())
    messages = [r.getMessage() for r in caplog.records]
    assert any("UP_TREND" in m for m in messages)
    assert any("RANGING" in m for m in messages)


def test_bad_config_fails_before_any_bar() -> None:
    with pytest.raises(ConfigError):
        MarketStateIndicator(_cfg(range_threshold=2.0))
