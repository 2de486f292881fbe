from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import ccxt

from marketstate.core.exchange import ExchangeError


@dataclass(frozen=True)
class Bar:
    high: float
    low: float
    close: float
    open: float = 0.0
    timestamp: int | None = None  # ms since epoch, when the feed provides it

    @classmethod
    def from_ohlcv_row(cls, row: Sequence[float]) -> Bar:
        # [ts, o, h, l, c, v]
        return cls(
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            open=float(row[1]),
            timestamp=int(row[0]) if row[0] is not None else None,
        )


@dataclass(frozen=True)
class OHLCVConfig:
    timeframe: str = "4h"
    limit: int = 200  # lookback + ATR warm-up with room to spare


def bars_from_ohlcv(ohlcv: Iterable[Sequence[float]]) -> list[Bar]:
    """
    Convert ccxt OHLCV rows into bars, keeping chronological order (oldest first).
    """
    return [Bar.from_ohlcv_row(row) for row in ohlcv]


def backward_window(bars: Sequence[Bar], size: int) -> list[Bar]:
    """
    Newest `size` bars of a chronological sequence, newest first (index 0 = latest).
    """
    if size < 1:
        raise ValueError("size must be > 0")
    if len(bars) < size:
        raise ValueError(f"need {size} bars, have {len(bars)}")
    return list(reversed(bars[len(bars) - size:]))


def fetch_bars(ex: ccxt.Exchange, symbol: str, cfg: OHLCVConfig) -> list[Bar]:
    """
    Fetch closed candles as bars, oldest first.
    The exchange returns the still-forming candle last; it is dropped.
    """
    try:
        ohlcv = ex.fetch_ohlcv(symbol, timeframe=cfg.timeframe, limit=cfg.limit)
        bar_ms = ex.parse_timeframe(cfg.timeframe) * 1000
        now_ms = ex.milliseconds()
    except Exception as e:
        raise ExchangeError(f"fetch_ohlcv failed for {symbol} on {ex.id}: {e}") from e

    if ohlcv and ohlcv[-1][0] + bar_ms > now_ms:
        ohlcv = ohlcv[:-1]
    return bars_from_ohlcv(ohlcv)
