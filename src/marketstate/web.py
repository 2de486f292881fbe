from __future__ import annotations

import uvicorn

from marketstate.core.logging_config import setup_logging


def main() -> int:
    setup_logging("INFO")
    uvicorn.run("marketstate.webapp:app", host="127.0.0.1", port=8787, reload=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
