from __future__ import annotations

from dataclasses import asdict

from fastapi import FastAPI, HTTPException

from marketstate import __version__
from marketstate.core.config import ConfigError
from marketstate.core.exchange import ExchangeError
from marketstate.ui.presets import PRESETS
from marketstate.ui.schemas import StateRequest
from marketstate.ui.service import run_state

app = FastAPI(title="marketstate", version=__version__)


@app.get("/api/presets")
def presets():
    return {"presets": [asdict(p) for p in PRESETS.values()]}


@app.post("/api/state")
def api_state(payload: dict):
    try:
        req = StateRequest(**payload)
    except TypeError as e:
        raise HTTPException(status_code=422, detail=f"invalid request: {e}") from e

    try:
        res = run_state(req)
    except ConfigError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ExchangeError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return asdict(res)
