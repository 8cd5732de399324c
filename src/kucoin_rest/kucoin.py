"""KuCoin v1 REST 接口客户端。"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional

import requests

from .client import DEFAULT_TIMEOUT, ApiClient, Method, RequestSpec
from .config import ClientConfig
from .envelope import Envelope, decode_envelope
from .models import (
    AccountHistory,
    ActiveOrders,
    Coin,
    CoinBalance,
    CoinBalancePage,
    CoinDepositAddress,
    MergedDealtOrders,
    Order,
    OrderDetails,
    OrdersBook,
    SpecificDealtOrders,
    Symbol,
    UserInfo,
    Withdrawal,
)

DEFAULT_PAGE_LIMIT = 1000
MAX_MERGED_LIMIT = 100

logger = logging.getLogger(__name__)


def _format_decimal(value: float) -> str:
    return f"{value:.8f}"


def _paging(params: Dict[str, str], limit: int, page: int, default_limit: int) -> None:
    params["limit"] = str(limit or default_limit)
    if page:
        params["page"] = str(page)


@dataclass
class Kucoin:
    """KuCoin REST client. One method per endpoint, one request per call."""

    api_key: str = ""
    api_secret: str = field(default="", repr=False)
    timeout: float = DEFAULT_TIMEOUT
    session: Optional[requests.Session] = field(default=None, repr=False)
    client: ApiClient = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.client = ApiClient(
            api_key=self.api_key,
            api_secret=self.api_secret,
            timeout=self.timeout,
            session=self.session,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, session: Optional[requests.Session] = None) -> "Kucoin":
        kucoin = cls(
            api_key=config.api_key,
            api_secret=config.api_secret,
            timeout=config.timeout,
            session=session,
        )
        proxies = config.proxy.as_requests_proxies()
        if proxies:
            kucoin.client.proxies = proxies
        kucoin.set_debug(config.debug)
        return kucoin

    def set_debug(self, enable: bool) -> None:
        self.client.set_debug(enable)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Kucoin":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _call(
        self,
        method: Method,
        path: str,
        params: Optional[Dict[str, str]] = None,
        auth_needed: bool = False,
    ) -> Envelope:
        spec = RequestSpec(method=method, path=path, params=params or {}, auth_needed=auth_needed)
        raw = self.client.send(spec)
        return decode_envelope(raw.body)

    def get_user_info(self) -> UserInfo:
        envelope = self._call(Method.GET, "user/info", auth_needed=True)
        return UserInfo.from_payload(envelope.data)

    def get_symbols(self) -> List[Symbol]:
        """获取所有开放交易市场。"""
        envelope = self._call(Method.GET, "market/open/symbols")
        return Symbol.list_from_payload(envelope.data)

    def get_symbol(self, market: str) -> Symbol:
        """Return the ticker of one trading market, e.g. ``KCS-BTC``."""
        envelope = self._call(Method.GET, "open/tick", {"symbol": market.upper()})
        return Symbol.from_payload(envelope.data)

    def get_coins(self) -> List[Coin]:
        envelope = self._call(Method.GET, "market/open/coins")
        return Coin.list_from_payload(envelope.data)

    def get_coin(self, coin: str) -> Coin:
        envelope = self._call(Method.GET, "market/open/coin-info", {"coin": coin.upper()})
        return Coin.from_payload(envelope.data)

    def get_coin_balance(self, coin: str) -> CoinBalance:
        envelope = self._call(Method.GET, f"account/{coin.upper()}/balance", auth_needed=True)
        return CoinBalance.from_payload(envelope.data)

    def get_coin_balances(self, limit: int = 0, page: int = 0) -> CoinBalancePage:
        """Return balances of every coin, paginated (limit defaults to 20)."""
        params: Dict[str, str] = {}
        _paging(params, limit, page, default_limit=20)
        envelope = self._call(Method.GET, "account/balance", params, auth_needed=True)
        return CoinBalancePage.from_payload(envelope.data)

    def get_coin_deposit_address(self, coin: str) -> CoinDepositAddress:
        envelope = self._call(
            Method.GET, f"account/{coin.upper()}/wallet/address", auth_needed=True
        )
        return CoinDepositAddress.from_payload(envelope.data)

    def get_orders_book(self, symbol: str, group: int = 0, limit: int = 0) -> OrdersBook:
        """获取指定交易对的买卖盘口。"""
        if not symbol:
            raise ValueError("symbol is required")
        params = {"symbol": symbol.upper()}
        if group:
            params["group"] = str(group)
        if limit:
            params["limit"] = str(limit)
        envelope = self._call(Method.GET, "open/orders", params)
        return OrdersBook.from_payload(envelope.data)

    def list_active_orders(self, symbol: str, side: str = "") -> ActiveOrders:
        """Return open orders for ``symbol``; ``side`` (BUY/SELL) is optional."""
        if not symbol:
            raise ValueError("symbol is required")
        params = {"symbol": symbol.upper()}
        if side:
            params["type"] = side.upper()
        envelope = self._call(Method.GET, "order/active-map", params, auth_needed=True)
        return ActiveOrders.from_payload(envelope.data)

    def create_order(self, symbol: str, side: str, price: float, amount: float) -> str:
        """Place a limit order and return its ``orderOid``."""
        if not symbol or not side:
            raise ValueError("symbol and side are required")
        params = {
            "symbol": symbol.upper(),
            "type": side.upper(),
            "price": _format_decimal(price),
            "amount": _format_decimal(amount),
        }
        envelope = self._call(Method.POST, "order", params, auth_needed=True)
        order = Order.from_payload(envelope.data)
        logger.info("Created %s order %s on %s", params["type"], order.order_oid, params["symbol"])
        return order.order_oid

    def cancel_order(self, symbol: str, order_oid: str, side: str) -> Envelope:
        if not symbol or not order_oid or not side:
            raise ValueError("symbol, order_oid and side are required")
        params = {"symbol": symbol.upper(), "orderOid": order_oid, "type": side.upper()}
        envelope = self._call(Method.POST, "cancel-order", params, auth_needed=True)
        logger.info("Cancelled order %s on %s", order_oid, params["symbol"])
        return envelope

    def get_order_details(
        self,
        symbol: str,
        side: str,
        order_oid: str,
        limit: int = 0,
        page: int = 0,
    ) -> OrderDetails:
        if not symbol or not side or not order_oid:
            raise ValueError("symbol, side and order_oid are required")
        params = {"symbol": symbol.upper(), "type": side.upper(), "orderOid": order_oid}
        if limit:
            params["limit"] = str(limit)
        if page:
            params["page"] = str(page)
        envelope = self._call(Method.GET, "order/detail", params, auth_needed=True)
        return OrderDetails.from_payload(envelope.data)

    def account_history(
        self,
        coin: str,
        side: str,
        status: str,
        limit: int = 0,
        page: int = 0,
    ) -> AccountHistory:
        """Return deposit or withdrawal records.

        ``side`` is DEPOSIT or WITHDRAW, ``status`` is FINISHED, CANCEL or
        PENDING. A zero ``limit`` requests 1000 records; a zero ``page`` is
        omitted.
        """
        if not coin or not side or not status:
            raise ValueError("coin, side and status are required")
        params = {"type": side.upper(), "status": status.upper()}
        _paging(params, limit, page, default_limit=DEFAULT_PAGE_LIMIT)
        envelope = self._call(
            Method.GET, f"account/{coin.upper()}/wallet/records", params, auth_needed=True
        )
        return AccountHistory.from_payload(envelope.data)

    def list_specific_dealt_orders(
        self,
        symbol: str,
        side: str,
        limit: int = 0,
        page: int = 0,
    ) -> SpecificDealtOrders:
        if not symbol or not side:
            raise ValueError("symbol and side are required")
        params = {"symbol": symbol.upper(), "type": side.upper()}
        _paging(params, limit, page, default_limit=DEFAULT_PAGE_LIMIT)
        envelope = self._call(Method.GET, "deal-orders", params, auth_needed=True)
        return SpecificDealtOrders.from_payload(envelope.data)

    def list_merged_dealt_orders(
        self,
        symbol: str = "",
        side: str = "",
        limit: int = 0,
        page: int = 0,
        since: int = 0,
        before: int = 0,
    ) -> MergedDealtOrders:
        """Return dealt orders; timestamps are epoch milliseconds.

        With a ``symbol`` the page size is capped at 100 (0 also means 100).
        Without one, ``limit`` is sent as given and omitted when 0.
        """
        params: Dict[str, str] = {}
        if symbol:
            params["symbol"] = symbol.upper()
        if side:
            params["type"] = side.upper()
        if symbol and not 0 < limit <= MAX_MERGED_LIMIT:
            params["limit"] = str(MAX_MERGED_LIMIT)
        elif limit:
            params["limit"] = str(limit)
        if page:
            params["page"] = str(page)
        if since:
            params["since"] = str(since)
        if before:
            params["before"] = str(before)
        envelope = self._call(Method.GET, "order/dealt", params, auth_needed=True)
        return MergedDealtOrders.from_payload(envelope.data)

    def create_withdrawal(self, coin: str, amount: float, address: str) -> Withdrawal:
        if not coin or not address:
            raise ValueError("coin and address are required")
        params = {
            "coin": coin.upper(),
            "amount": _format_decimal(amount),
            "address": address,
        }
        envelope = self._call(
            Method.POST, f"account/{coin.upper()}/withdraw/apply", params, auth_needed=True
        )
        logger.info("Requested withdrawal of %s %s", params["amount"], params["coin"])
        return Withdrawal.from_payload(envelope.data if isinstance(envelope.data, dict) else None)

    def cancel_withdrawal(self, coin: str, tx_oid: str) -> Withdrawal:
        if not coin or not tx_oid:
            raise ValueError("coin and tx_oid are required")
        envelope = self._call(
            Method.POST,
            f"account/{coin.upper()}/withdraw/cancel",
            {"txOid": tx_oid},
            auth_needed=True,
        )
        return Withdrawal.from_payload(envelope.data if isinstance(envelope.data, dict) else None)


def summarize_symbols(symbols: List[Symbol]) -> List[str]:
    """Create a compact human-friendly list of market identifiers."""
    return [symbol.symbol for symbol in symbols]


__all__ = ["Kucoin", "summarize_symbols"]
