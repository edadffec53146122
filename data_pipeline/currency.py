"""
Currency conversion used to republish ticker prices in a reporting currency.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable


class ConversionError(RuntimeError):
    """Raised when an amount cannot be converted between two currencies."""


@runtime_checkable
class CurrencyConverter(Protocol):
    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Return ``amount`` expressed in ``to_currency``."""


class StaticRateConverter:
    """
    Converts through a fixed table of USD values per currency unit.

    ``{"AUD": 0.66}`` means one AUD is worth 0.66 USD.
    """

    def __init__(self, usd_rates: Mapping[str, float]) -> None:
        self._rates = {code.upper(): float(rate) for code, rate in usd_rates.items()}
        self._rates.setdefault("USD", 1.0)

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        source = from_currency.upper()
        target = to_currency.upper()
        if source == target:
            return float(amount)
        try:
            source_rate = self._rates[source]
            target_rate = self._rates[target]
        except KeyError as exc:
            raise ConversionError(f"No exchange rate for {exc.args[0]}") from exc
        if target_rate <= 0:
            raise ConversionError(f"Invalid exchange rate for {target}: {target_rate}")
        return float(amount) * source_rate / target_rate
