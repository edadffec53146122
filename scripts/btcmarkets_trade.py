"""
Command-line helper for BTC Markets trading and account queries.

Usage examples:
    python scripts/btcmarkets_trade.py place \
        --pair BTCAUD --side Bid --type Limit --price 45000 --volume 0.01

    python scripts/btcmarkets_trade.py cancel --order-id 123456 --order-id 123457

    python scripts/btcmarkets_trade.py orders --pair BTCAUD --historic
    python scripts/btcmarkets_trade.py balance

Environment variables:
    BTCMARKETS_API_KEY
    BTCMARKETS_API_SECRET (base64, as issued by BTC Markets)
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import uuid
from dataclasses import asdict
from pathlib import Path

# Ensure repository root is importable when executed as a script.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from exchanges.base_client import ExchangeCredentials
from exchanges.btcmarkets.client import BtcMarketsClient
from exchanges.btcmarkets.errors import BtcMarketsError, PartialCancelFailure
from exchanges.btcmarkets.pairs import split_pair
from exchanges.btcmarkets.schemas import to_exchange_units
from exchanges.btcmarkets.settings import BtcMarketsSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BTC Markets Trade Helper")
    subparsers = parser.add_subparsers(dest="command", required=True)

    place_parser = subparsers.add_parser("place", help="Submit an order")
    place_parser.add_argument("--pair", required=True, help="Currency pair, e.g. BTCAUD")
    place_parser.add_argument("--side", required=True, choices=["Bid", "Ask"], help="Order side")
    place_parser.add_argument("--type", required=True, choices=["Limit", "Market"], help="Order type")
    place_parser.add_argument("--price", type=float, default=0.0, help="Limit price in the quote currency")
    place_parser.add_argument("--volume", type=float, required=True, help="Volume in the base currency")
    place_parser.add_argument("--client-request-id", help="Optional client request id")

    cancel_parser = subparsers.add_parser("cancel", help="Cancel one or more orders")
    cancel_parser.add_argument(
        "--order-id", type=int, action="append", required=True, dest="order_ids", help="Order id"
    )

    orders_parser = subparsers.add_parser("orders", help="List open orders or order history")
    orders_parser.add_argument("--pair", required=True, help="Currency pair, e.g. BTCAUD")
    orders_parser.add_argument("--limit", type=int, default=10)
    orders_parser.add_argument("--since", type=int, default=0)
    orders_parser.add_argument("--historic", action="store_true", help="Query order history")

    detail_parser = subparsers.add_parser("detail", help="Show details for specific orders")
    detail_parser.add_argument(
        "--order-id", type=int, action="append", required=True, dest="order_ids", help="Order id"
    )

    trades_parser = subparsers.add_parser("trades", help="List the account's own fills")
    trades_parser.add_argument("--pair", required=True, help="Currency pair, e.g. BTCAUD")
    trades_parser.add_argument("--limit", type=int, default=10)
    trades_parser.add_argument("--since", type=int, default=0)

    subparsers.add_parser("balance", help="Show account balances")
    return parser


def run_command(client: BtcMarketsClient, args: argparse.Namespace) -> object:
    if args.command == "place":
        instrument, currency = split_pair(args.pair)
        order_id = client.place_order(
            currency,
            instrument,
            to_exchange_units(args.price),
            to_exchange_units(args.volume),
            args.side,
            args.type,
            args.client_request_id or uuid.uuid4().hex,
        )
        return {"status": "submitted", "order_id": order_id}
    if args.command == "cancel":
        return {"status": "cancelled", "cancelled": client.cancel_orders(args.order_ids)}
    if args.command == "orders":
        instrument, currency = split_pair(args.pair)
        orders = client.fetch_orders(currency, instrument, args.limit, args.since, args.historic)
        return [asdict(order) for order in orders]
    if args.command == "detail":
        return [asdict(order) for order in client.fetch_order_detail(args.order_ids)]
    if args.command == "trades":
        instrument, currency = split_pair(args.pair)
        trades = client.fetch_trade_history(currency, instrument, args.limit, args.since)
        return [asdict(trade) for trade in trades]
    return [asdict(balance) for balance in client.fetch_balances()]


def main() -> None:
    args = build_parser().parse_args()

    settings = BtcMarketsSettings.from_env()
    client = BtcMarketsClient(settings.base_url, verbose=settings.verbose, fee=settings.fee)
    try:
        client.authenticate(
            ExchangeCredentials(
                api_key=_env_or_exit("BTCMARKETS_API_KEY"),
                api_secret=_env_or_exit("BTCMARKETS_API_SECRET"),
            )
        )
        response = run_command(client, args)
    except PartialCancelFailure as exc:
        print(f"Error: {exc} (cancelled: {exc.cancelled}, failed: {exc.failed})", file=sys.stderr)
        sys.exit(1)
    except (BtcMarketsError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        client.close()

    print(json.dumps(response, indent=2))


def _env_or_exit(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        print(f"Environment variable {name} is required", file=sys.stderr)
        sys.exit(2)
    return value


if __name__ == "__main__":
    main()
