"""
Runtime configuration for the BTC Markets adapter.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_BASE_URL = "https://api.btcmarkets.net"
EXCHANGE_NAME = "BTC Markets"

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}


@dataclass(slots=True)
class BtcMarketsSettings:
    """Configuration surface for the client and its ticker poller."""

    name: str = EXCHANGE_NAME
    base_url: str = DEFAULT_BASE_URL
    enabled: bool = True
    verbose: bool = False
    websocket: bool = False
    polling_delay: float = 10.0
    fee: float = 0.85
    api_key: str = ""
    api_secret: str = ""
    enabled_pairs: List[str] = field(default_factory=list)
    available_pairs: List[str] = field(default_factory=list)
    base_currencies: List[str] = field(default_factory=lambda: ["AUD"])
    reporting_currency: str = "USD"
    fx_rates: Dict[str, float] = field(default_factory=dict)

    @property
    def authenticated_api_support(self) -> bool:
        return bool(self.api_key and self.api_secret)

    @staticmethod
    def from_env() -> "BtcMarketsSettings":
        """
        Build settings from ``BTCMARKETS_*`` environment variables.

        Values missing from the environment fall back to ``config.py`` when it
        is importable, then to the dataclass defaults.
        """
        try:
            import config as config_module  # type: ignore
        except ModuleNotFoundError:
            config_module = None  # type: ignore

        defaults = BtcMarketsSettings()

        def pick(env_name: str, attr: str, fallback: Any) -> Any:
            raw = os.getenv(env_name)
            if raw is not None and raw.strip() != "":
                return raw
            if config_module is not None:
                return getattr(config_module, attr, fallback)
            return fallback

        return BtcMarketsSettings(
            base_url=str(pick("BTCMARKETS_BASE_URL", "BTCMARKETS_BASE_URL", defaults.base_url)),
            enabled=_parse_bool(pick("BTCMARKETS_ENABLED", "BTCMARKETS_ENABLED", defaults.enabled)),
            verbose=_parse_bool(pick("BTCMARKETS_VERBOSE", "BTCMARKETS_VERBOSE", defaults.verbose)),
            polling_delay=float(
                pick("BTCMARKETS_POLLING_DELAY", "BTCMARKETS_POLLING_DELAY", defaults.polling_delay)
            ),
            fee=float(pick("BTCMARKETS_FEE", "BTCMARKETS_FEE", defaults.fee)),
            api_key=str(pick("BTCMARKETS_API_KEY", "BTCMARKETS_API_KEY", "") or ""),
            api_secret=str(pick("BTCMARKETS_API_SECRET", "BTCMARKETS_API_SECRET", "") or ""),
            enabled_pairs=_parse_list(pick("BTCMARKETS_ENABLED_PAIRS", "BTCMARKETS_ENABLED_PAIRS", [])),
            available_pairs=_parse_list(
                pick("BTCMARKETS_AVAILABLE_PAIRS", "BTCMARKETS_AVAILABLE_PAIRS", [])
            ),
            base_currencies=_parse_list(
                pick("BTCMARKETS_BASE_CURRENCIES", "BTCMARKETS_BASE_CURRENCIES", defaults.base_currencies)
            ),
            reporting_currency=str(
                pick("BTCMARKETS_REPORTING_CURRENCY", "REPORTING_CURRENCY", defaults.reporting_currency)
            ).upper(),
            fx_rates=dict(getattr(config_module, "FX_RATES", {}) if config_module is not None else {}),
        )

    def public_view(self) -> Dict[str, Any]:
        """Return the settings without credentials, for reporting endpoints."""
        return {
            "name": self.name,
            "enabled": self.enabled,
            "verbose": self.verbose,
            "websocket": self.websocket,
            "polling_delay": self.polling_delay,
            "fee": self.fee,
            "authenticated_api_support": self.authenticated_api_support,
            "enabled_pairs": list(self.enabled_pairs),
            "available_pairs": list(self.available_pairs),
            "base_currencies": list(self.base_currencies),
            "reporting_currency": self.reporting_currency,
        }


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _parse_list(value: Optional[Any]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    return [str(item).strip().upper() for item in items if item and str(item).strip()]
