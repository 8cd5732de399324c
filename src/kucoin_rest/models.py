"""Typed views over KuCoin response payloads."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Type, TypeVar

T = TypeVar("T", bound="Model")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass
class Model:
    """Base for payload dataclasses.

    Field ``foo_bar`` is read from JSON key ``fooBar`` unless the field
    metadata names another key. ``nested`` maps a field to the model used for
    its value; list values are decoded item by item.
    """

    nested: ClassVar[Dict[str, Type["Model"]]] = {}

    @classmethod
    def from_payload(cls: Type[T], payload: Optional[Mapping[str, Any]]) -> T:
        payload = payload or {}
        values: Dict[str, Any] = {}
        for item in fields(cls):
            key = item.metadata.get("key", _camel(item.name))
            if key not in payload:
                continue
            value = payload[key]
            model = cls.nested.get(item.name)
            if model is not None and value is not None:
                if isinstance(value, list):
                    value = [model.from_payload(entry) for entry in value]
                else:
                    value = model.from_payload(value)
            values[item.name] = value
        return cls(**values)

    @classmethod
    def list_from_payload(cls: Type[T], payload: Optional[List[Mapping[str, Any]]]) -> List[T]:
        return [cls.from_payload(entry) for entry in payload or []]


@dataclass
class LoginEntry(Model):
    ip: str = ""
    context: Any = None
    time: int = 0


@dataclass
class LoginRecord(Model):
    nested: ClassVar[Dict[str, Type[Model]]] = {"last": LoginEntry, "current": LoginEntry}

    last: Optional[LoginEntry] = None
    current: Optional[LoginEntry] = None


@dataclass
class UserInfo(Model):
    nested: ClassVar[Dict[str, Type[Model]]] = {"login_record": LoginRecord}

    oid: str = ""
    name: str = ""
    nickname: Any = None
    email: str = ""
    phone: str = ""
    language: str = ""
    currency: str = ""
    referrer_code: str = field(default="", metadata={"key": "referrer_code"})
    base_fee_rate: float = 0.0
    has_credential: bool = False
    credential_number: str = ""
    credential_validated: bool = False
    photo_credential_validated: bool = False
    video_validated: bool = False
    phone_validated: bool = False
    email_validated: bool = False
    google_two_fa_binding: bool = False
    has_trade_password: bool = False
    login_record: Optional[LoginRecord] = None


@dataclass
class Symbol(Model):
    symbol: str = ""
    coin_type: str = ""
    coin_type_pair: str = ""
    trading: bool = False
    last_deal_price: float = 0.0
    buy: float = 0.0
    sell: float = 0.0
    change: float = 0.0
    change_rate: float = 0.0
    high: float = 0.0
    low: float = 0.0
    vol: float = 0.0
    vol_value: float = 0.0
    fee_rate: float = 0.0
    sort: int = 0
    datetime: int = 0
    stick: bool = False
    fav: bool = False


@dataclass
class Coin(Model):
    coin: str = ""
    name: str = ""
    trade_precision: int = 0
    confirmation_count: int = 0
    withdraw_min_fee: float = 0.0
    withdraw_min_amount: float = 0.0
    withdraw_fee_rate: float = 0.0
    withdraw_remark: str = ""
    deposit_remark: Any = None
    info_url: Any = None
    enable_withdraw: bool = False
    enable_deposit: bool = False


@dataclass
class CoinBalance(Model):
    coin_type: str = ""
    balance: float = 0.0
    freeze_balance: float = 0.0


@dataclass
class CoinDepositAddress(Model):
    oid: str = ""
    address: str = ""
    context: Any = None
    user_oid: str = ""
    coin_type: str = ""
    created_at: int = 0
    updated_at: int = 0
    deleted_at: Any = None
    last_received_at: int = 0


@dataclass
class Order(Model):
    order_oid: str = ""


@dataclass
class ActiveOrder(Model):
    oid: str = ""
    type: str = ""
    user_oid: Any = None
    coin_type: str = ""
    coin_type_pair: str = ""
    direction: str = ""
    price: float = 0.0
    deal_amount: float = 0.0
    pending_amount: float = 0.0
    created_at: int = 0
    updated_at: int = 0


@dataclass
class ActiveOrders(Model):
    nested: ClassVar[Dict[str, Type[Model]]] = {"sell": ActiveOrder, "buy": ActiveOrder}

    sell: List[ActiveOrder] = field(default_factory=list, metadata={"key": "SELL"})
    buy: List[ActiveOrder] = field(default_factory=list, metadata={"key": "BUY"})


@dataclass
class OrdersBook(Model):
    """Price levels as ``[price, amount, volume]`` rows."""

    comment: str = field(default="", metadata={"key": "_comment"})
    sell: List[List[float]] = field(default_factory=list, metadata={"key": "SELL"})
    buy: List[List[float]] = field(default_factory=list, metadata={"key": "BUY"})


@dataclass
class DealOrderEntry(Model):
    amount: float = 0.0
    deal_value: float = 0.0
    deal_price: float = 0.0
    fee: float = 0.0
    fee_rate: float = 0.0


@dataclass
class DealOrderPage(Model):
    nested: ClassVar[Dict[str, Type[Model]]] = {"datas": DealOrderEntry}

    total: int = 0
    first_page: bool = False
    last_page: bool = False
    curr_page_no: int = 0
    limit: int = 0
    page_nos: int = 0
    datas: List[DealOrderEntry] = field(default_factory=list)


@dataclass
class OrderDetails(Model):
    nested: ClassVar[Dict[str, Type[Model]]] = {"deal_orders": DealOrderPage}

    order_oid: str = ""
    type: str = ""
    user_oid: str = ""
    coin_type: str = ""
    coin_type_pair: str = ""
    order_price: float = 0.0
    deal_amount: float = 0.0
    pending_amount: float = 0.0
    deal_value_total: float = 0.0
    deal_price_average: float = 0.0
    fee_total: float = 0.0
    deal_orders: Optional[DealOrderPage] = None


@dataclass
class AccountRecord(Model):
    oid: str = ""
    type: str = ""
    status: str = ""
    amount: float = 0.0
    fee: float = 0.0
    address: str = ""
    remark: str = ""
    context: str = ""
    user_oid: str = ""
    coin_type: str = ""
    outer_wallet_txid: Any = None
    created_at: int = 0
    updated_at: int = 0
    deleted_at: Any = None


@dataclass
class Page(Model):
    total: int = 0
    limit: int = 0
    page_nos: int = 0
    curr_page_no: int = 0
    navigate_page_nos: List[int] = field(default_factory=list)
    user_oid: str = ""
    start_row: int = 0
    first_page: bool = False
    last_page: bool = False


@dataclass
class AccountHistory(Page):
    nested: ClassVar[Dict[str, Type[Model]]] = {"datas": AccountRecord}

    coin_type: str = ""
    type: Any = None
    status: Any = None
    datas: List[AccountRecord] = field(default_factory=list)


@dataclass
class DealtOrder(Model):
    oid: str = ""
    order_oid: str = ""
    direction: str = ""
    deal_price: float = 0.0
    amount: float = 0.0
    deal_value: float = 0.0
    created_at: int = 0


@dataclass
class SpecificDealtOrders(Page):
    nested: ClassVar[Dict[str, Type[Model]]] = {"datas": DealtOrder}

    direction: Any = None
    datas: List[DealtOrder] = field(default_factory=list)


@dataclass
class MergedDealtOrder(Model):
    oid: str = ""
    order_oid: str = ""
    coin_type: str = ""
    coin_type_pair: str = ""
    direction: str = ""
    deal_direction: str = ""
    deal_price: float = 0.0
    amount: float = 0.0
    deal_value: float = 0.0
    fee: float = 0.0
    fee_rate: float = 0.0
    created_at: int = 0


@dataclass
class MergedDealtOrders(Model):
    nested: ClassVar[Dict[str, Type[Model]]] = {"datas": MergedDealtOrder}

    total: int = 0
    limit: int = 0
    page: int = 0
    datas: List[MergedDealtOrder] = field(default_factory=list)


@dataclass
class CoinBalancePage(Page):
    nested: ClassVar[Dict[str, Type[Model]]] = {"datas": CoinBalance}

    datas: List[CoinBalance] = field(default_factory=list)


@dataclass
class Withdrawal(Model):
    """Withdrawal apply/cancel responses carry no documented payload."""


__all__ = [
    "AccountHistory",
    "AccountRecord",
    "ActiveOrder",
    "ActiveOrders",
    "Coin",
    "CoinBalance",
    "CoinBalancePage",
    "CoinDepositAddress",
    "DealOrderEntry",
    "DealOrderPage",
    "DealtOrder",
    "LoginEntry",
    "LoginRecord",
    "MergedDealtOrder",
    "MergedDealtOrders",
    "Model",
    "Order",
    "OrderDetails",
    "OrdersBook",
    "SpecificDealtOrders",
    "Symbol",
    "UserInfo",
    "Withdrawal",
]
