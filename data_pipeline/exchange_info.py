"""
In-process aggregation of the latest price per exchange and currency pair.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional, Protocol, Tuple


@dataclass(slots=True)
class ExchangeInfo:
    """Latest price reported by an exchange for a base/quote combination."""

    exchange: str
    base_currency: str
    quote_currency: str
    price: float
    volume: float
    updated_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


class ExchangeInfoSink(Protocol):
    """Fire-and-forget destination for price observations."""

    def record(
        self,
        exchange: str,
        base_currency: str,
        quote_currency: str,
        price: float,
        volume: float,
    ) -> None:
        """Store or forward a single price observation."""


class ExchangeInfoStore:
    """Keeps only the most recent observation per (exchange, base, quote)."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._entries: Dict[Tuple[str, str, str], ExchangeInfo] = {}

    def record(
        self,
        exchange: str,
        base_currency: str,
        quote_currency: str,
        price: float,
        volume: float,
    ) -> None:
        info = ExchangeInfo(
            exchange=exchange,
            base_currency=base_currency.upper(),
            quote_currency=quote_currency.upper(),
            price=float(price),
            volume=float(volume),
        )
        key = (info.exchange, info.base_currency, info.quote_currency)
        with self._lock:
            self._entries[key] = info

    def get(self, exchange: str, base_currency: str, quote_currency: str) -> Optional[ExchangeInfo]:
        key = (exchange, base_currency.upper(), quote_currency.upper())
        with self._lock:
            return self._entries.get(key)

    def list(self) -> List[ExchangeInfo]:
        with self._lock:
            return list(self._entries.values())
