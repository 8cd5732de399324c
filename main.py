"""KuCoin 命令行入口。"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT / "src"))

from kucoin_rest.config import load_client_config  # noqa: E402
from kucoin_rest.errors import KucoinError  # noqa: E402
from kucoin_rest.kucoin import Kucoin, summarize_symbols  # noqa: E402


def _pretty_print(data: Any) -> None:
    if is_dataclass(data):
        data = asdict(data)
    elif isinstance(data, list):
        data = [asdict(item) if is_dataclass(item) else item for item in data]
    print(json.dumps(data, ensure_ascii=False, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="KuCoin REST API client")
    parser.add_argument("--debug", action="store_true", help="Log redacted request/response dumps")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("config", help="Show effective configuration")
    subparsers.add_parser("symbols", help="List trading markets")
    subparsers.add_parser("coins", help="List coins")
    subparsers.add_parser("user", help="Show account user info")

    ticker_parser = subparsers.add_parser("ticker", help="Fetch market ticker")
    ticker_parser.add_argument("symbol", help="Market symbol, e.g. KCS-BTC")

    coin_parser = subparsers.add_parser("coin", help="Fetch coin info")
    coin_parser.add_argument("coin", help="Coin, e.g. KCS")

    book_parser = subparsers.add_parser("book", help="Fetch order book")
    book_parser.add_argument("symbol", help="Market symbol, e.g. KCS-BTC")
    book_parser.add_argument("--limit", type=int, default=0, help="Number of levels")

    balance_parser = subparsers.add_parser("balance", help="Fetch coin balance")
    balance_parser.add_argument("coin", help="Coin, e.g. KCS")

    active_parser = subparsers.add_parser("active", help="List active orders")
    active_parser.add_argument("symbol", help="Market symbol, e.g. KCS-BTC")
    active_parser.add_argument("--side", default="", help="BUY or SELL")

    history_parser = subparsers.add_parser("history", help="Deposit/withdrawal records")
    history_parser.add_argument("coin", help="Coin, e.g. KCS")
    history_parser.add_argument("--side", default="DEPOSIT", help="DEPOSIT or WITHDRAW")
    history_parser.add_argument(
        "--status",
        default="FINISHED",
        help="FINISHED, CANCEL or PENDING",
    )
    history_parser.add_argument("--limit", type=int, default=0, help="Page size")
    history_parser.add_argument("--page", type=int, default=0, help="Page number")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)

    settings: dict[str, object] = {}
    if args.debug:
        settings["debug"] = True
    if args.timeout is not None:
        settings["timeout"] = args.timeout
    config = load_client_config(settings)

    if args.command == "config":
        _pretty_print(config.summary())
        return 0

    with Kucoin.from_config(config) as kucoin:
        try:
            if args.command == "symbols":
                symbols = kucoin.get_symbols()
                _pretty_print({"count": len(symbols), "symbols": summarize_symbols(symbols)})
            elif args.command == "coins":
                _pretty_print(kucoin.get_coins())
            elif args.command == "user":
                _pretty_print(kucoin.get_user_info())
            elif args.command == "ticker":
                _pretty_print(kucoin.get_symbol(args.symbol))
            elif args.command == "coin":
                _pretty_print(kucoin.get_coin(args.coin))
            elif args.command == "book":
                _pretty_print(kucoin.get_orders_book(args.symbol, limit=args.limit))
            elif args.command == "balance":
                _pretty_print(kucoin.get_coin_balance(args.coin))
            elif args.command == "active":
                _pretty_print(kucoin.list_active_orders(args.symbol, args.side))
            elif args.command == "history":
                _pretty_print(
                    kucoin.account_history(
                        args.coin, args.side, args.status, args.limit, args.page
                    )
                )
        except KucoinError as exc:
            logging.getLogger(__name__).error("%s failed: %s", args.command, exc)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
