from __future__ import annotations

from dataclasses import dataclass

import ccxt


@dataclass(frozen=True)
class ExchangeConfig:
    exchange_id: str = "binance"
    timeout_ms: int = 20000
    enable_rate_limit: bool = True


class ExchangeError(RuntimeError):
    pass


def create_exchange(cfg: ExchangeConfig) -> ccxt.Exchange:
    """
    Public-data ccxt client. No API keys; candles only.
    """
    klass = getattr(ccxt, cfg.exchange_id, None)
    if klass is None or not isinstance(klass, type):
        raise ExchangeError(f"Unsupported exchange_id: {cfg.exchange_id}")

    return klass(
        {
            "enableRateLimit": cfg.enable_rate_limit,
            "timeout": cfg.timeout_ms,
        }
    )


def parse_pairs(raw: str) -> list[str]:
    pairs = [p.strip().upper() for p in raw.split(",") if p.strip()]
    for p in pairs:
        if "/" not in p:
            raise ExchangeError(f"pair must look like BASE/QUOTE, got {p!r}")
    return pairs
