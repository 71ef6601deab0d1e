"""
Command-line helper for the Bitfinex trading adapter.

Usage examples:
    python scripts/bitfinex_trade.py quote
    python scripts/bitfinex_trade.py balance --currency usd
    python scripts/bitfinex_trade.py order --side buy --quantity 0.01 --price 24000
    python scripts/bitfinex_trade.py status --order-id 123456789
    python scripts/bitfinex_trade.py position
    python scripts/bitfinex_trade.py limit-price --volume 0.5 --bid

Environment variables:
    BITFINEX_API_KEY
    BITFINEX_API_SECRET
    BITFINEX_API_URL (optional)
    BITFINEX_CACERT (optional CA bundle path)
    BITFINEX_SYMBOL (optional, defaults to btcusd)
    BITFINEX_ORDER_BOOK_FACTOR (optional)
    BITFINEX_LOG_FILE / BITFINEX_LOG_LEVEL (optional)
"""

from __future__ import annotations

import argparse
import json
import logging.config
import sys
from typing import Any, Dict

import httpx

import config
from exchanges.base_client import ExchangeCredentials
from exchanges.bitfinex import BitfinexClient
from exchanges.transport import RestTransport, TransportError

PRIVATE_COMMANDS = {"balance", "order", "status", "position"}


def build_logging_config(log_file: str, level: str) -> Dict[str, Any]:
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stderr",
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": log_file,
            "encoding": "utf-8",
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s | %(levelname)s %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "root": {"level": level.upper(), "handlers": list(handlers)},
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bitfinex Trade Helper")
    parser.add_argument("--symbol", default=config.BITFINEX_SYMBOL, help="Trading pair (default: %(default)s)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("quote", help="Show best bid/ask")

    balance_parser = subparsers.add_parser("balance", help="Show available trading balance")
    balance_parser.add_argument("--currency", required=True, help="Currency code, e.g. usd")

    order_parser = subparsers.add_parser("order", help="Submit a limit order")
    order_parser.add_argument("--side", required=True, choices=["buy", "sell"], help="Order side")
    order_parser.add_argument("--quantity", required=True, type=float, help="Order amount")
    order_parser.add_argument("--price", required=True, type=float, help="Limit price")

    status_parser = subparsers.add_parser("status", help="Check whether an order is complete")
    status_parser.add_argument("--order-id", required=True, help="Bitfinex order id")

    subparsers.add_parser("position", help="Show the active position size")

    limit_parser = subparsers.add_parser("limit-price", help="Depth-weighted limit price for a volume")
    limit_parser.add_argument("--volume", required=True, type=float, help="Target volume")
    side_group = limit_parser.add_mutually_exclusive_group(required=True)
    side_group.add_argument("--bid", dest="is_bid", action="store_true", help="Scan the bid side")
    side_group.add_argument("--ask", dest="is_bid", action="store_false", help="Scan the ask side")
    limit_parser.add_argument(
        "--factor",
        type=float,
        default=config.ORDER_BOOK_FACTOR,
        help="Depth factor (default: %(default)s)",
    )
    return parser


def run(args: argparse.Namespace, client: BitfinexClient) -> Any:
    if args.command == "quote":
        quote = client.get_quote()
        return {"bid": quote.bid, "ask": quote.ask}
    if args.command == "balance":
        return {"currency": args.currency, "available": client.get_available(args.currency)}
    if args.command == "order":
        return {"order_id": client.send_order(args.side, args.quantity, args.price)}
    if args.command == "status":
        return {"order_id": args.order_id, "complete": client.is_order_complete(args.order_id)}
    if args.command == "position":
        return {"position": client.get_active_position()}
    # limit-price
    return {"limit_price": client.get_limit_price(args.volume, args.is_bid)}


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.config.dictConfig(build_logging_config(config.LOG_FILE, config.LOG_LEVEL))

    credentials = None
    if args.command in PRIVATE_COMMANDS:
        credentials = ExchangeCredentials(
            api_key=_config_or_exit("BITFINEX_API_KEY", config.BITFINEX_API_KEY),
            api_secret=_config_or_exit("BITFINEX_API_SECRET", config.BITFINEX_API_SECRET),
        )

    transport = RestTransport(
        config.BITFINEX_API_URL,
        cacert=config.BITFINEX_CACERT or None,
        timeout=config.HTTP_TIMEOUT,
    )
    client = BitfinexClient(
        transport,
        credentials=credentials,
        symbol=args.symbol,
        depth_factor=getattr(args, "factor", config.ORDER_BOOK_FACTOR),
    )
    try:
        response = run(args, client)
    except (httpx.HTTPError, TransportError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        client.close()

    print(json.dumps(response, indent=2))


def _config_or_exit(name: str, value: str) -> str:
    if not value:
        print(f"Environment variable {name} is required", file=sys.stderr)
        sys.exit(2)
    return value


if __name__ == "__main__":
    main()
