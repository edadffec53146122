"""
Abstract client definitions for centralized exchange integrations.

Concrete adapters (e.g. BTC Markets) should subclass `ExchangeClient` and
implement the required methods while respecting the exchange's error semantics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence, runtime_checkable


@dataclass(slots=True)
class ExchangeCredentials:
    """Typed container for exchange authentication data."""

    api_key: str
    api_secret: str


@runtime_checkable
class ExchangeClient(Protocol):
    """Protocol describing the surface area for exchange integrations."""

    name: str
    enabled: bool

    def authenticate(self, credentials: ExchangeCredentials) -> None:
        """Load credentials into the client; disables the client if they are unusable."""

    def fetch_ticker(self, pair: str) -> Any:
        """Return the latest ticker snapshot for a currency pair."""

    def fetch_balances(self) -> list[Any]:
        """Return the latest wallet balances."""

    def place_order(self, *args: Any, **kwargs: Any) -> int:
        """Submit an order to the exchange and return its identifier."""

    def cancel_orders(self, order_ids: Sequence[int]) -> bool:
        """Cancel existing orders by identifier."""

    def close(self) -> None:
        """Release network resources (sessions, etc.)."""
