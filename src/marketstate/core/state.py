from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from marketstate.core.bars import Bar
from marketstate.core.config import validate_classifier_params

RANGE_HIGH = "RangeHigh"
RANGE_LOW = "RangeLow"
LOWER_HIGH_PREFIX = "LowerHigh"
HIGHER_LOW_PREFIX = "HigherLow"
STATUS_TEXT = "StateText"


class MarketState(IntEnum):
    RANGING = 0
    UP_TREND = 1
    DOWN_TREND = 2


@dataclass(frozen=True)
class ClassifierConfig:
    lookback_period: int = 20
    range_threshold: float = 0.5  # fraction of ATR

    def __post_init__(self) -> None:
        validate_classifier_params(self.lookback_period, self.range_threshold)


@dataclass(frozen=True)
class HorizontalLine:
    """
    Line from bar_index back in time to bar 0 at a fixed price.
    """
    name: str
    bar_index: int
    price: float
    color: str = "white"


@dataclass(frozen=True)
class StatusText:
    text: str
    name: str = STATUS_TEXT
    position: str = "top_right"


Annotation = HorizontalLine | StatusText


@dataclass(frozen=True)
class RollingState:
    range_high: float | None = None
    range_low: float | None = None
    last_trend_extreme: float | None = None


@dataclass(frozen=True)
class ClassificationResult:
    state: MarketState
    value: int
    annotations: tuple[Annotation, ...] = ()
    rolling: RollingState = field(default_factory=RollingState)

    @property
    def lines(self) -> list[HorizontalLine]:
        return [a for a in self.annotations if isinstance(a, HorizontalLine)]

    @property
    def status_text(self) -> str:
        for a in self.annotations:
            if isinstance(a, StatusText):
                return a.text
        return ""


def _fmt(price: float) -> str:
    return f"{price:,.2f}"


def status_text(state: MarketState, rolling: RollingState) -> str:
    if state == MarketState.RANGING:
        return f"Ranging: High {_fmt(rolling.range_high)}, Low {_fmt(rolling.range_low)}"
    if state == MarketState.UP_TREND:
        return f"Up Trend: HL {_fmt(rolling.last_trend_extreme)}"
    return f"Down Trend: LH {_fmt(rolling.last_trend_extreme)}"


def window_extremes(bars: Sequence[Bar], lookback_period: int) -> tuple[float, float]:
    """
    Highest high and lowest low over bars 0..lookback_period-1.
    """
    window = bars[:lookback_period]
    return max(b.high for b in window), min(b.low for b in window)


def _scan_lower_highs(bars: Sequence[Bar], lookback_period: int) -> tuple[float, list[HorizontalLine]]:
    extreme = bars[0].high
    lines: list[HorizontalLine] = []
    for i in range(1, lookback_period):
        if bars[i].high > extreme and bars[i].close > bars[i + 1].close:
            lines.append(HorizontalLine(f"{LOWER_HIGH_PREFIX}{i}", i, bars[i].high, color="red"))
            extreme = bars[i].high
    return extreme, lines


def _scan_higher_lows(bars: Sequence[Bar], lookback_period: int) -> tuple[float, list[HorizontalLine]]:
    extreme = bars[0].low
    lines: list[HorizontalLine] = []
    for i in range(1, lookback_period):
        if bars[i].low < extreme and bars[i].close > bars[i + 1].close:
            lines.append(HorizontalLine(f"{HIGHER_LOW_PREFIX}{i}", i, bars[i].low, color="green"))
            extreme = bars[i].low
    return extreme, lines


def classify(
    bars: Sequence[Bar],
    lookback_period: int,
    range_threshold: float,
    atr: float,
) -> ClassificationResult:
    """
    Classify the newest bar as ranging or trending.

    bars: newest first (bars[0] is the bar that just closed), at least
          lookback_period + 1 of them. Callers stay idle until that many exist.
    atr: average true range at bar 0.

    A rising close (close[0] > close[1]) is labelled DOWN_TREND and tracks
    lower highs; anything else is UP_TREND tracking higher lows. The labels are
    kept exactly as the chart indicator has always reported them.
    """
    range_size = bars[0].high - bars[0].low

    lines: list[HorizontalLine]
    if range_size <= atr * range_threshold:
        state = MarketState.RANGING
        high, low = window_extremes(bars, lookback_period)
        rolling = RollingState(range_high=high, range_low=low)
        lines = [
            HorizontalLine(RANGE_HIGH, lookback_period, high),
            HorizontalLine(RANGE_LOW, lookback_period, low),
        ]
    elif bars[0].close > bars[1].close:
        state = MarketState.DOWN_TREND
        extreme, lines = _scan_lower_highs(bars, lookback_period)
        rolling = RollingState(last_trend_extreme=extreme)
    else:
        state = MarketState.UP_TREND
        extreme, lines = _scan_higher_lows(bars, lookback_period)
        rolling = RollingState(last_trend_extreme=extreme)

    annotations: tuple[Annotation, ...] = (*lines, StatusText(status_text(state, rolling)))
    return ClassificationResult(state=state, value=int(state), annotations=annotations, rolling=rolling)


def classify_with(bars: Sequence[Bar], cfg: ClassifierConfig, atr: float) -> ClassificationResult | None:
    """
    Same as classify(), but idle (None) while the window is too short.
    """
    if len(bars) <= cfg.lookback_period:
        return None
    return classify(bars, cfg.lookback_period, cfg.range_threshold, atr)
