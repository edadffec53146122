"""
Local configuration for the BTC Markets adapter.

Keep credentials out of version control; prefer the ``BTCMARKETS_*``
environment variables for anything secret. Values here act as defaults that
the environment can override (see ``exchanges.btcmarkets.settings``).
"""

BTCMARKETS_BASE_URL = "https://api.btcmarkets.net"
BTCMARKETS_ENABLED = True
BTCMARKETS_VERBOSE = False

# Default polling interval (seconds) for the ticker poller loop.
BTCMARKETS_POLLING_DELAY = 10

# Trading fee percentage charged by the exchange.
BTCMARKETS_FEE = 0.85

# API key in plaintext; the secret stays base64-encoded as issued by BTC Markets.
BTCMARKETS_API_KEY = ""
BTCMARKETS_API_SECRET = ""

BTCMARKETS_AVAILABLE_PAIRS = [
    "BTCAUD",
    "LTCAUD",
    "ETHAUD",
    "ETCAUD",
    "XRPAUD",
    "BCHAUD",
]
BTCMARKETS_ENABLED_PAIRS = [
    "BTCAUD",
    "LTCAUD",
    "ETHAUD",
]
BTCMARKETS_BASE_CURRENCIES = ["AUD"]

# Ticker prices are republished against this currency as well.
REPORTING_CURRENCY = "USD"

# Static conversion table: value of one unit of the currency in USD.
FX_RATES = {
    "USD": 1.0,
    "AUD": 0.66,
    "NZD": 0.6,
    "EUR": 1.08,
}
