from __future__ import annotations

import logging

from marketstate.core.config import MarketStateConfig
from marketstate.core.exchange import ExchangeConfig, create_exchange
from marketstate.core.report import result_to_dict
from marketstate.scan import compute_state_for_symbol
from marketstate.ui.presets import get_preset
from marketstate.ui.schemas import StateRequest, StateResponse

logger = logging.getLogger(__name__)


def config_for_request(req: StateRequest) -> MarketStateConfig:
    """
    Preset values with request overrides. Raises ConfigError on bad parameters.
    """
    preset = get_preset(req.preset)
    return MarketStateConfig(
        lookback_period=req.lookback_period if req.lookback_period is not None else preset.lookback_period,
        range_threshold=req.range_threshold if req.range_threshold is not None else preset.range_threshold,
        legacy_cleanup=req.legacy_cleanup,
        exchange=req.exchange,
        timeframe=req.timeframe if req.timeframe is not None else preset.timeframe,
        bars=req.bars if req.bars is not None else preset.bars,
    )


def run_state(req: StateRequest) -> StateResponse:
    cfg = config_for_request(req)
    ex = create_exchange(ExchangeConfig(exchange_id=cfg.exchange))

    ind, _close = compute_state_for_symbol(ex, req.pair, cfg)
    result = ind.last_result
    logger.info("%s %s: %s", req.pair, cfg.timeframe, result.state.name if result else "IDLE")

    base = dict(
        exchange=ex.id,
        pair=req.pair,
        timeframe=cfg.timeframe,
        bars=ind.current_bar + 1,
        lookback_period=cfg.lookback_period,
        range_threshold=cfg.range_threshold,
        atr=float(ind.atr or 0.0),
    )
    if result is None:
        return StateResponse(**base, state="IDLE", value=None, status_text="not enough bars")

    d = result_to_dict(result)
    return StateResponse(
        **base,
        state=d["state"],
        value=d["value"],
        status_text=d["status_text"],
        annotations=d["annotations"],
        range_high=d["range_high"],
        range_low=d["range_low"],
        last_trend_extreme=d["last_trend_extreme"],
    )
