import pytest

from marketstate.core.bars import Bar

# oldest first: [ts, open, high, low, close, volume]
# with atr_period=1, lookback_period=2, range_threshold=0.5:
#   bar 2 -> UP_TREND with a HigherLow1 marker at 94
#   bar 3 -> RANGING, high 99 / low 96
TREND_THEN_RANGE_ROWS = [
    [1_000, 97.0, 100.0, 96.0, 97.0, 1.0],
    [2_000, 97.0, 101.0, 94.0, 100.0, 1.0],
    [3_000, 100.0, 99.0, 96.0, 98.0, 1.0],
    [4_000, 98.0, 99.0, 98.5, 98.8, 1.0],
]


class FakeExchange:
    def __init__(self, rows=None, error: Exception | None = None, exchange_id: str = "fake", now_ms: int = 10**13):
        self.id = exchange_id
        self.now_ms = now_ms
        self.rows = rows if rows is not None else TREND_THEN_RANGE_ROWS
        self.error = error
        self.calls: list[tuple[str, str, int]] = []

    def fetch_ohlcv(self, symbol, timeframe="1h", limit=100):
        self.calls.append((symbol, timeframe, limit))
        if self.error is not None:
            raise self.error
        return [list(r) for r in self.rows[-limit:]]

    def parse_timeframe(self, timeframe):
        units = {"m": 60, "h": 3600, "d": 86400}
        return int(timeframe[:-1]) * units[timeframe[-1]]

    def milliseconds(self):
        return self.now_ms


@pytest.fixture
def fake_exchange():
    return FakeExchange()


@pytest.fixture
def make_exchange():
    return FakeExchange


@pytest.fixture
def trend_then_range_bars():
    return [Bar.from_ohlcv_row(r) for r in TREND_THEN_RANGE_ROWS]
