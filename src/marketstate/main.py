from __future__ import annotations

from marketstate import __version__


def main() -> int:
    print(f"marketstate v{__version__}")
    print("")
    print("Commands:")
    print("  python -m marketstate.scan --pairs BTC/USDT,ETH/USDT --timeframe 4h --lookback 20 --threshold 0.5")
    print("  python -m marketstate.scan --format json --out reports/state.json --pairs BTC/USDT")
    print("  python -m marketstate.replay --pair BTC/USDT --timeframe 1h --bars 300 --last 50")
    print("  python -m marketstate.web")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
