from __future__ import annotations

import argparse
import logging

from marketstate.core.bars import OHLCVConfig, fetch_bars
from marketstate.core.config import ConfigError
from marketstate.core.exchange import ExchangeConfig, ExchangeError, create_exchange
from marketstate.core.indicator import MarketStateIndicator
from marketstate.core.io import dumps, write_json, write_text
from marketstate.core.logging_config import setup_logging
from marketstate.core.report import build_series_text
from marketstate.scan import resolve_config

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="marketstate replay: per-bar state values for one pair (read-only).")
    p.add_argument("--exchange", default=None)
    p.add_argument("--pair", default="BTC/USDT")
    p.add_argument("--timeframe", default=None)
    p.add_argument("--bars", type=int, default=None)
    p.add_argument("--last", type=int, default=50, help="only print the newest N bars (0 = all)")

    p.add_argument("--lookback", type=int, default=None)
    p.add_argument("--threshold", type=float, default=None)
    p.add_argument("--fixed-cleanup", action="store_true")

    p.add_argument("--format", choices=["text", "json"], default="text")
    p.add_argument("--out", default=None)
    p.add_argument("--config", default="marketstate.toml")
    p.add_argument("--log-level", default="INFO")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        cfg = resolve_config(args)
    except ConfigError as e:
        logger.error("%s", e)
        return 2

    try:
        ex = create_exchange(ExchangeConfig(exchange_id=cfg.exchange))
        bars = fetch_bars(ex, args.pair, OHLCVConfig(timeframe=cfg.timeframe, limit=cfg.bars))
    except ExchangeError as e:
        logger.error("%s", e)
        return 1

    ind = MarketStateIndicator(cfg)
    ind.run(bars)

    timestamps = [b.timestamp for b in bars]
    values = ind.values
    if args.last > 0:
        timestamps = timestamps[-args.last:]
        values = values[-args.last:]

    if args.format == "json":
        payload = {
            "exchange": ex.id,
            "pair": args.pair,
            "timeframe": cfg.timeframe,
            "series": [{"timestamp": ts, "value": v} for ts, v in zip(timestamps, values)],
            "annotations": ind.sink.lines(),
            "status_text": ind.sink.status_text,
        }
        if args.out:
            write_json(args.out, payload)
        else:
            print(dumps(payload))
    else:
        text = build_series_text(args.pair, cfg.timeframe, timestamps, values)
        text += f"\n{ind.sink.status_text}\nannotations on board: {len(ind.sink)}\n"
        if args.out:
            write_text(args.out, text)
        else:
            print(text, end="")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
