from __future__ import annotations

import argparse
import dataclasses
import logging

from marketstate.core.bars import OHLCVConfig, fetch_bars
from marketstate.core.config import ConfigError, MarketStateConfig, load_config
from marketstate.core.exchange import ExchangeConfig, ExchangeError, create_exchange, parse_pairs
from marketstate.core.indicator import MarketStateIndicator, evaluate
from marketstate.core.io import dumps, write_json, write_text
from marketstate.core.logging_config import setup_logging
from marketstate.core.report import ReportRow, build_state_table, result_to_dict, row_from_result

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="marketstate: current ranging/trending state per pair (read-only).")
    p.add_argument("--exchange", default=None)
    p.add_argument("--pairs", default="BTC/USDT,ETH/USDT", help="comma-separated")
    p.add_argument("--timeframe", default=None)
    p.add_argument("--bars", type=int, default=None)

    p.add_argument("--lookback", type=int, default=None)
    p.add_argument("--threshold", type=float, default=None, help="fraction of ATR, in (0, 1]")
    p.add_argument("--fixed-cleanup", action="store_true", help="remove the trend marker names that are drawn")

    p.add_argument("--format", choices=["text", "json"], default="text")
    p.add_argument("--out", default=None, help="write output to file (txt or json based on --format)")
    p.add_argument("--config", default="marketstate.toml")
    p.add_argument("--log-level", default="WARNING")

    return p.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> MarketStateConfig:
    """
    File config with command-line overrides on top. Raises ConfigError.
    """
    cfg = load_config(args.config)
    overrides = {
        "exchange": args.exchange,
        "timeframe": args.timeframe,
        "bars": args.bars,
        "lookback_period": args.lookback,
        "range_threshold": args.threshold,
    }
    changes = {k: v for k, v in overrides.items() if v is not None}
    if getattr(args, "fixed_cleanup", False):
        changes["legacy_cleanup"] = False
    return dataclasses.replace(cfg, **changes)


def compute_state_for_symbol(ex, symbol: str, cfg: MarketStateConfig) -> tuple[MarketStateIndicator, float]:
    bars = fetch_bars(ex, symbol, OHLCVConfig(timeframe=cfg.timeframe, limit=cfg.bars))
    ind = evaluate(bars, cfg)
    close = bars[-1].close if bars else 0.0
    return ind, close


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        cfg = resolve_config(args)
        pairs = parse_pairs(args.pairs)
        ex = create_exchange(ExchangeConfig(exchange_id=cfg.exchange))
    except (ConfigError, ExchangeError) as e:
        logger.error("%s", e)
        return 2

    rows: list[ReportRow] = []
    table: list[dict] = []
    for sym in pairs:
        try:
            ind, close = compute_state_for_symbol(ex, sym, cfg)
        except ExchangeError as e:
            logger.warning("skipping %s: %s", sym, e)
            continue

        atr = ind.atr or 0.0
        result = ind.last_result
        rows.append(row_from_result(sym, result, atr, close))
        table.append(
            {
                "symbol": sym,
                "close": close,
                "atr": atr,
                "bars": ind.current_bar + 1,
                "result": result_to_dict(result) if result is not None else None,
            }
        )

    if args.format == "json":
        payload = {
            "exchange": ex.id,
            "timeframe": cfg.timeframe,
            "lookback_period": cfg.lookback_period,
            "range_threshold": cfg.range_threshold,
            "rows": table,
        }
        if args.out:
            write_json(args.out, payload)
        else:
            print(dumps(payload))
    else:
        header = (
            f"Exchange: {ex.id} | tf={cfg.timeframe} bars={cfg.bars} "
            f"lookback={cfg.lookback_period} threshold={cfg.range_threshold}"
        )
        text = build_state_table(rows, header=header)
        if args.out:
            write_text(args.out, text)
        else:
            print(text, end="")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
