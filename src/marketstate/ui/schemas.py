from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class StateRequest:
    exchange: str = "binance"
    preset: str = "swing"
    pair: str = "BTC/USDT"

    # optional overrides (if user changes from preset)
    timeframe: str | None = None
    bars: int | None = None
    lookback_period: int | None = None
    range_threshold: float | None = None

    legacy_cleanup: bool = True


@dataclass(frozen=True)
class StateResponse:
    exchange: str
    pair: str
    timeframe: str
    bars: int
    lookback_period: int
    range_threshold: float
    atr: float
    state: str  # MarketState name, or "IDLE"
    value: int | None
    status_text: str = ""
    annotations: list[dict] = field(default_factory=list)
    range_high: float | None = None
    range_low: float | None = None
    last_trend_extreme: float | None = None
