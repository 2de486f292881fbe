from __future__ import annotations


def true_range(high: float, low: float, prev_close: float | None) -> float:
    if prev_close is None:
        return high - low
    return max(
        high - low,
        abs(high - prev_close),
        abs(low - prev_close),
    )


def atr_series(highs: list[float], lows: list[float], closes: list[float], period: int = 14) -> list[float]:
    """
    Average true range per bar, oldest first.

    Same warm-up as the charting platforms: plain running mean of the true
    ranges until `period` bars exist, Wilder smoothing afterwards.
    """
    if period <= 0:
        raise ValueError("period must be > 0")

    out: list[float] = []
    prev: float | None = None
    for i in range(len(closes)):
        prev_close = closes[i - 1] if i > 0 else None
        prev = next_atr(prev, true_range(highs[i], lows[i], prev_close), i, period)
        out.append(prev)
    return out


def next_atr(prev_atr: float | None, tr: float, bar_number: int, period: int = 14) -> float:
    """
    One step of atr_series(); bar_number is the 0-based index of the new bar.
    """
    if prev_atr is None or bar_number == 0:
        return tr
    if bar_number < period:
        return (prev_atr * bar_number + tr) / (bar_number + 1)
    return (prev_atr * (period - 1) + tr) / period
