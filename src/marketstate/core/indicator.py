from __future__ import annotations

import logging
from collections.abc import Iterable

from marketstate.core.annotations import AnnotationBoard, stale_annotation_names
from marketstate.core.bars import Bar, backward_window
from marketstate.core.config import MarketStateConfig
from marketstate.core.indicators import next_atr, true_range
from marketstate.core.state import ClassificationResult, ClassifierConfig, MarketState, classify

logger = logging.getLogger(__name__)


class MarketStateIndicator:
    """
    Bar-close driver around classify().

    Keeps the bar history and a running ATR, stays idle until more than
    `lookback_period` bars exist, and pushes each classification to the sink:
    the stale name set is removed first, then the new annotations are added.
    Bars must arrive in order, one call per closed bar.
    """

    def __init__(self, cfg: MarketStateConfig | None = None, sink: AnnotationBoard | None = None) -> None:
        self.cfg = cfg or MarketStateConfig()
        self.classifier = ClassifierConfig(
            lookback_period=self.cfg.lookback_period,
            range_threshold=self.cfg.range_threshold,
        )
        self.sink = sink if sink is not None else AnnotationBoard()

        self._bars: list[Bar] = []  # newest lookback+1 bars, oldest first
        self._count = 0
        self._atr: float | None = None
        self._values: list[int | None] = []
        self._last: ClassificationResult | None = None

    @property
    def current_bar(self) -> int:
        """0-based index of the newest bar, -1 before the first one."""
        return self._count - 1

    @property
    def atr(self) -> float | None:
        return self._atr

    @property
    def values(self) -> list[int | None]:
        return list(self._values)

    @property
    def last_result(self) -> ClassificationResult | None:
        return self._last

    @property
    def state(self) -> MarketState | None:
        return self._last.state if self._last is not None else None

    def on_bar_close(self, bar: Bar) -> ClassificationResult | None:
        prev_close = self._bars[-1].close if self._bars else None
        self._bars.append(bar)
        self._count += 1
        if len(self._bars) > self.classifier.lookback_period + 1:
            del self._bars[0]
        self._atr = next_atr(self._atr, true_range(bar.high, bar.low, prev_close), self.current_bar, self.cfg.atr_period)

        lookback = self.classifier.lookback_period
        if self.current_bar < lookback:
            self._values.append(None)
            return None

        window = backward_window(self._bars, lookback + 1)
        result = classify(window, lookback, self.classifier.range_threshold, self._atr)

        removed = self.sink.apply(
            stale_annotation_names(lookback, legacy=self.cfg.legacy_cleanup),
            result.annotations,
        )

        if self._last is None or self._last.state != result.state:
            logger.info("bar %d: state -> %s (%s)", self.current_bar, result.state.name, result.status_text)
        logger.debug(
            "bar %d: atr=%.4f value=%d drawn=%d removed=%d",
            self.current_bar,
            self._atr,
            result.value,
            len(result.annotations),
            removed,
        )

        self._values.append(result.value)
        self._last = result
        return result

    def run(self, bars: Iterable[Bar]) -> list[ClassificationResult | None]:
        return [self.on_bar_close(b) for b in bars]


def evaluate(bars: Iterable[Bar], cfg: MarketStateConfig | None = None) -> MarketStateIndicator:
    """
    Replay a chronological bar history through a fresh indicator.
    """
    ind = MarketStateIndicator(cfg)
    ind.run(bars)
    return ind
