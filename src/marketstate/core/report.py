from __future__ import annotations

from dataclasses import dataclass

from marketstate.core.state import ClassificationResult, HorizontalLine


@dataclass(frozen=True)
class ReportRow:
    symbol: str
    state: str  # MarketState name, or "IDLE"
    value: int | None
    atr: float
    close: float
    text: str = ""


def row_from_result(symbol: str, result: ClassificationResult | None, atr: float, close: float) -> ReportRow:
    if result is None:
        return ReportRow(symbol=symbol, state="IDLE", value=None, atr=atr, close=close, text="not enough bars")
    return ReportRow(
        symbol=symbol,
        state=result.state.name,
        value=result.value,
        atr=atr,
        close=close,
        text=result.status_text,
    )


def result_to_dict(result: ClassificationResult) -> dict:
    annotations: list[dict] = []
    for a in result.annotations:
        if isinstance(a, HorizontalLine):
            annotations.append(
                {"kind": "line", "name": a.name, "bar_index": a.bar_index, "price": a.price, "color": a.color}
            )
        else:
            annotations.append({"kind": "text", "name": a.name, "text": a.text, "position": a.position})
    return {
        "state": result.state.name,
        "value": result.value,
        "status_text": result.status_text,
        "annotations": annotations,
        "range_high": result.rolling.range_high,
        "range_low": result.rolling.range_low,
        "last_trend_extreme": result.rolling.last_trend_extreme,
    }


def build_state_table(rows: list[ReportRow], header: str = "") -> str:
    out: list[str] = []
    if header:
        out.append(header)
    out.append("-" * 78)
    out.append("SYMBOL".ljust(16) + " " + "STATE".ljust(10) + " " + "VAL".rjust(3) + " " + "ATR".rjust(12) + "  STATUS")
    out.append("-" * 78)

    if not rows:
        out.append("No rows.")

    for r in rows:
        val = "-" if r.value is None else str(r.value)
        out.append(f"{r.symbol.ljust(16)} {r.state.ljust(10)} {val.rjust(3)} {r.atr:12.4f}  {r.text}".rstrip())

    counts: dict[str, int] = {}
    for r in rows:
        counts[r.state] = counts.get(r.state, 0) + 1
    if counts:
        out.append("-" * 78)
        out.append("  ".join(f"{k}: {v}" for k, v in sorted(counts.items())))
    return "\n".join(out) + "\n"


def build_series_text(symbol: str, timeframe: str, timestamps: list[int | None], values: list[int | None]) -> str:
    out: list[str] = [f"{symbol} {timeframe} state series (0=RANGING 1=UP_TREND 2=DOWN_TREND, - = idle)", "-" * 40]
    for ts, v in zip(timestamps, values):
        stamp = "" if ts is None else str(ts)
        val = "-" if v is None else str(v)
        out.append(f"{stamp:>14}  {val}")
    return "\n".join(out) + "\n"
