"""
Application-wide dependency providers for the web service.

The functions declared here are meant to be used with FastAPI's dependency
injection framework while keeping instantiation logic in one place.
"""

from __future__ import annotations

from functools import lru_cache

from data_pipeline.currency import StaticRateConverter
from data_pipeline.exchange_info import ExchangeInfoStore
from data_pipeline.ticker_cache import TickerCache
from data_pipeline.ticker_poller import TickerPoller
from exchanges.btcmarkets.client import BtcMarketsClient
from exchanges.btcmarkets.settings import BtcMarketsSettings


@lru_cache(maxsize=1)
def get_settings() -> BtcMarketsSettings:
    return BtcMarketsSettings.from_env()


@lru_cache(maxsize=1)
def get_client() -> BtcMarketsClient:
    """Shared exchange client; disabled when the configured secret is unusable."""
    return BtcMarketsClient.from_settings(get_settings())


@lru_cache(maxsize=1)
def get_ticker_cache() -> TickerCache:
    return TickerCache()


@lru_cache(maxsize=1)
def get_exchange_info_store() -> ExchangeInfoStore:
    return ExchangeInfoStore()


@lru_cache(maxsize=1)
def get_poller() -> TickerPoller:
    """Build the poller wired to the shared cache and aggregation store."""
    settings = get_settings()
    return TickerPoller(
        get_client(),
        get_ticker_cache(),
        pairs=settings.enabled_pairs,
        polling_delay=settings.polling_delay,
        converter=StaticRateConverter(settings.fx_rates),
        sink=get_exchange_info_store(),
        reporting_currency=settings.reporting_currency,
    )
