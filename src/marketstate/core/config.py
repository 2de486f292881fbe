from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(ValueError):
    pass


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_classifier_params(lookback_period: int, range_threshold: float) -> None:
    """
    Fail fast on parameters the classifier cannot run with.
    """
    if not _is_int(lookback_period):
        raise ConfigError(f"lookback_period must be an integer, got {lookback_period!r}")
    if not _is_real(range_threshold):
        raise ConfigError(f"range_threshold must be a number, got {range_threshold!r}")
    if lookback_period < 1:
        raise ConfigError(f"lookback_period must be >= 1, got {lookback_period}")
    if not 0.0 < range_threshold <= 1.0:
        raise ConfigError(f"range_threshold must be in (0, 1], got {range_threshold}")


@dataclass(frozen=True)
class MarketStateConfig:
    # classifier
    lookback_period: int = 20
    range_threshold: float = 0.5  # fraction of ATR
    atr_period: int = 14
    legacy_cleanup: bool = True  # historical removal names, trend markers leak

    # data
    exchange: str = "binance"
    timeframe: str = "4h"
    bars: int = 200

    def __post_init__(self) -> None:
        validate_classifier_params(self.lookback_period, self.range_threshold)
        for name in ("atr_period", "bars"):
            value = getattr(self, name)
            if not _is_int(value):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ConfigError(f"{name} must be >= 1, got {value}")
        if not isinstance(self.legacy_cleanup, bool):
            raise ConfigError(f"legacy_cleanup must be true or false, got {self.legacy_cleanup!r}")
        for name in ("exchange", "timeframe"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigError(f"{name} must be a non-empty string, got {value!r}")


def load_config(path: str = "marketstate.toml") -> MarketStateConfig:
    p = Path(path)
    if not p.exists():
        return MarketStateConfig()

    try:
        data = tomllib.loads(p.read_text(encoding="utf-8")) or {}
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid config file {p}: {e}") from e

    def get(section: str, key: str, default):
        return (data.get(section, {}) or {}).get(key, default)

    # values go through as parsed; MarketStateConfig rejects wrong types
    return MarketStateConfig(
        lookback_period=get("classifier", "lookback_period", 20),
        range_threshold=get("classifier", "range_threshold", 0.5),
        atr_period=get("classifier", "atr_period", 14),
        legacy_cleanup=get("classifier", "legacy_cleanup", True),
        exchange=get("data", "exchange", "binance"),
        timeframe=get("data", "timeframe", "4h"),
        bars=get("data", "bars", 200),
    )
