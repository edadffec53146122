"""
Ticker polling and price republishing for the BTC Markets adapter.
"""

from .currency import ConversionError, StaticRateConverter  # noqa: F401
from .exchange_info import ExchangeInfo, ExchangeInfoStore  # noqa: F401
from .ticker_cache import TickerCache  # noqa: F401
from .ticker_poller import TickerPoller  # noqa: F401
