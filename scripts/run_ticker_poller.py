"""
CLI wrapper for the BTC Markets ticker poller.

Runs the same ``data_pipeline.ticker_poller`` loop the web service starts, but
in the foreground, logging every refreshed ticker until interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Ensure repository root is importable when executed as a script.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from data_pipeline.currency import StaticRateConverter
from data_pipeline.exchange_info import ExchangeInfoStore
from data_pipeline.ticker_cache import TickerCache
from data_pipeline.ticker_poller import TickerPoller
from exchanges.btcmarkets.client import BtcMarketsClient
from exchanges.btcmarkets.errors import ConfigError
from exchanges.btcmarkets.settings import BtcMarketsSettings


async def async_main(args: argparse.Namespace) -> None:
    settings = BtcMarketsSettings.from_env()
    if args.verbose:
        settings.verbose = True
    pairs = args.pair or settings.enabled_pairs
    interval = settings.polling_delay if args.interval is None else max(1, int(args.interval))

    client = BtcMarketsClient.from_settings(settings)
    poller = TickerPoller(
        client,
        TickerCache(),
        pairs=pairs,
        polling_delay=interval,
        converter=StaticRateConverter(settings.fx_rates),
        sink=ExchangeInfoStore(),
        reporting_currency=settings.reporting_currency,
    )
    try:
        await poller.run()
    except asyncio.CancelledError:
        print("Ticker poller cancelled, preparing to shut down...")
    finally:
        poller.stop()
        client.close()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Poll BTC Markets tickers and log them.")
    parser.add_argument(
        "--pair",
        action="append",
        dest="pair",
        default=None,
        help="Currency pair, e.g. BTCAUD (can be provided multiple times). "
        "Defaults to BTCMARKETS_ENABLED_PAIRS / config.py.",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Polling interval in seconds (defaults to the configured polling delay).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log raw requests and responses.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        asyncio.run(async_main(args))
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
