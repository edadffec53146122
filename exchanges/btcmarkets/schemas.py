"""
Typed views over the BTC Markets REST payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

OrderSide = Literal["Bid", "Ask"]
OrderType = Literal["Limit", "Market"]

# Prices and volumes travel as integers scaled by 1e8.
EXCHANGE_UNIT = 100_000_000


def to_exchange_units(value: float) -> int:
    """Convert a decimal amount into the exchange's integer representation."""
    return int(round(float(value) * EXCHANGE_UNIT))


def _float(value: Any) -> float:
    if value in (None, ""):
        return 0.0
    return float(value)


def _int(value: Any) -> int:
    if value in (None, ""):
        return 0
    return int(value)


@dataclass(slots=True)
class Ticker:
    """Latest top-of-book and last trade for a pair."""

    best_bid: float
    best_ask: float
    last_price: float
    currency: str
    instrument: str
    timestamp: int
    volume_24h: float = 0.0

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Ticker":
        return cls(
            best_bid=_float(payload.get("bestBid")),
            best_ask=_float(payload.get("bestAsk")),
            last_price=_float(payload.get("lastPrice")),
            currency=payload.get("currency") or "",
            instrument=payload.get("instrument") or "",
            timestamp=_int(payload.get("timestamp")),
            volume_24h=_float(payload.get("volume24h")),
        )


@dataclass(slots=True)
class Orderbook:
    """Order book levels as ``(price, volume)`` tuples, in exchange order."""

    currency: str
    instrument: str
    timestamp: int
    bids: List[Tuple[float, float]] = field(default_factory=list)
    asks: List[Tuple[float, float]] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Orderbook":
        return cls(
            currency=payload.get("currency") or "",
            instrument=payload.get("instrument") or "",
            timestamp=_int(payload.get("timestamp")),
            bids=_levels(payload.get("bids")),
            asks=_levels(payload.get("asks")),
        )


def _levels(raw: Any) -> List[Tuple[float, float]]:
    levels: List[Tuple[float, float]] = []
    for entry in raw or []:
        levels.append((float(entry[0]), float(entry[1])))
    return levels


@dataclass(slots=True)
class Trade:
    """Public trade print."""

    trade_id: int
    amount: float
    price: float
    date: int

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Trade":
        return cls(
            trade_id=_int(payload.get("tid")),
            amount=_float(payload.get("amount")),
            price=_float(payload.get("price")),
            date=_int(payload.get("date")),
        )


@dataclass(slots=True, frozen=True)
class OrderRequest:
    """Order as submitted to ``/order/create``; never mutated after sending."""

    currency: str
    instrument: str
    price: int
    volume: int
    side: OrderSide
    order_type: OrderType
    client_request_id: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "currency": self.currency,
            "instrument": self.instrument,
            "price": self.price,
            "volume": self.volume,
            "orderSide": self.side,
            "ordertype": self.order_type,
            "clientRequestId": self.client_request_id,
        }


@dataclass(slots=True)
class OrderResponse:
    """Envelope returned by order creation."""

    success: bool
    id: int = 0
    error_code: Optional[int] = None
    error_message: str = ""
    client_request_id: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "OrderResponse":
        return cls(
            success=bool(payload.get("success")),
            id=_int(payload.get("id")),
            error_code=payload.get("errorCode"),
            error_message=payload.get("errorMessage") or "",
            client_request_id=payload.get("clientRequestId") or "",
        )


@dataclass(slots=True)
class CancelItem:
    """Per-order outcome inside a batch cancel response."""

    success: bool
    id: int
    error_code: Optional[int] = None
    error_message: str = ""


@dataclass(slots=True)
class CancelResponse:
    """Batch cancel envelope; item outcomes are independent of ``success``."""

    success: bool
    error_code: Optional[int] = None
    error_message: str = ""
    responses: List[CancelItem] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CancelResponse":
        items = [
            CancelItem(
                success=bool(item.get("success")),
                id=_int(item.get("id")),
                error_code=item.get("errorCode"),
                error_message=item.get("errorMessage") or "",
            )
            for item in payload.get("responses") or []
        ]
        return cls(
            success=bool(payload.get("success")),
            error_code=payload.get("errorCode"),
            error_message=payload.get("errorMessage") or "",
            responses=items,
        )


@dataclass(slots=True)
class OrderTrade:
    """Fill belonging to one of the account's orders."""

    id: int
    creation_time: float
    description: str
    price: float
    volume: float
    fee: float

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "OrderTrade":
        return cls(
            id=_int(payload.get("id")),
            creation_time=_float(payload.get("creationTime")),
            description=payload.get("description") or "",
            price=_float(payload.get("price")),
            volume=_float(payload.get("volume")),
            fee=_float(payload.get("fee")),
        )


@dataclass(slots=True)
class Order:
    """Order detail as returned by the open/history/detail endpoints."""

    id: int
    currency: str
    instrument: str
    side: str
    order_type: str
    creation_time: float
    status: str
    error_message: str
    price: float
    volume: float
    open_volume: float
    client_request_id: str = ""
    trades: List[OrderTrade] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Order":
        return cls(
            id=_int(payload.get("id")),
            currency=payload.get("currency") or "",
            instrument=payload.get("instrument") or "",
            side=payload.get("orderSide") or "",
            order_type=payload.get("ordertype") or "",
            creation_time=_float(payload.get("creationTime")),
            status=payload.get("status") or "",
            error_message=payload.get("errorMessage") or "",
            price=_float(payload.get("price")),
            volume=_float(payload.get("volume")),
            open_volume=_float(payload.get("openVolume")),
            client_request_id=payload.get("clientRequestId") or "",
            trades=[OrderTrade.from_payload(item) for item in payload.get("trades") or []],
        )


@dataclass(slots=True)
class Balance:
    """Balance for a single currency."""

    currency: str
    balance: float
    pending_funds: float

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Balance":
        return cls(
            currency=payload.get("currency") or "",
            balance=_float(payload.get("balance")),
            pending_funds=_float(payload.get("pendingFunds")),
        )
