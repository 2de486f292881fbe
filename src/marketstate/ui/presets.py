from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StatePreset:
    key: str
    label: str
    timeframe: str
    bars: int
    lookback_period: int
    range_threshold: float


PRESETS: dict[str, StatePreset] = {
    "scalping": StatePreset(
        key="scalping",
        label="Scalping (5m)",
        timeframe="5m",
        bars=240,
        lookback_period=10,
        range_threshold=0.4,
    ),
    "intraday": StatePreset(
        key="intraday",
        label="Intraday (15m)",
        timeframe="15m",
        bars=240,
        lookback_period=20,
        range_threshold=0.5,
    ),
    "swing": StatePreset(
        key="swing",
        label="Swing (4h)",
        timeframe="4h",
        bars=200,
        lookback_period=20,
        range_threshold=0.5,
    ),
    "position": StatePreset(
        key="position",
        label="Position (1d)",
        timeframe="1d",
        bars=365,
        lookback_period=30,
        range_threshold=0.6,
    ),
}


def get_preset(key: str) -> StatePreset:
    return PRESETS.get(key, PRESETS["swing"])
