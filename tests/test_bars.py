import pytest

from marketstate.core.bars import Bar, OHLCVConfig, backward_window, bars_from_ohlcv, fetch_bars
from marketstate.core.exchange import ExchangeConfig, ExchangeError, create_exchange, parse_pairs


def test_bar_from_ohlcv_row() -> None:
    b = Bar.from_ohlcv_row([1_700_000_000_000, "10", "12.5", "9.5", "11", "42"])
    assert b == Bar(high=12.5, low=9.5, close=11.0, open=10.0, timestamp=1_700_000_000_000)


def test_backward_window_is_newest_first() -> None:
    bars = bars_from_ohlcv([[i, 1, 2 + i, 0, 1 + i, 0] for i in range(5)])
    w = backward_window(bars, 3)
    assert [b.timestamp for b in w] == [4, 3, 2]


def test_backward_window_too_short() -> None:
    with pytest.raises(ValueError):
        backward_window([Bar(high=1, low=0, close=0.5)], 2)


def test_fetch_bars(fake_exchange) -> None:
    bars = fetch_bars(fake_exchange, "BTC/USDT", OHLCVConfig(timeframe="1h", limit=3))
    assert len(bars) == 3
    assert bars[-1].close == 98.8
    assert fake_exchange.calls == [("BTC/USDT", "1h", 3)]


def test_fetch_bars_wraps_errors(make_exchange) -> None:
    ex = make_exchange(error=RuntimeError("boom"))
    with pytest.raises(ExchangeError, match="boom"):
        fetch_bars(ex, "BTC/USDT", OHLCVConfig())


def test_unknown_exchange() -> None:
    with pytest.raises(ExchangeError):
        create_exchange(ExchangeConfig(exchange_id="no_such_exchange"))


def test_parse_pairs() -> None:
    assert parse_pairs(" btc/usdt, ETH/USDT ,,") == ["BTC/USDT", "ETH/USDT"]
    with pytest.raises(ExchangeError):
        parse_pairs("BTCUSDT")


def test_fetch_bars_drops_forming_candle(make_exchange) -> None:
    # last row opened at 4_000 ms, a 1m candle closes at 64_000 ms
    ex = make_exchange(now_ms=34_000)
    bars = fetch_bars(ex, "BTC/USDT", OHLCVConfig(timeframe="1m", limit=10))
    assert [b.timestamp for b in bars] == [1_000, 2_000, 3_000]


def test_fetch_bars_keeps_last_candle_once_closed(make_exchange) -> None:
    ex = make_exchange(now_ms=64_000)
    bars = fetch_bars(ex, "BTC/USDT", OHLCVConfig(timeframe="1m", limit=10))
    assert bars[-1].timestamp == 4_000
