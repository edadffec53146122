"""
BTC Markets exchange adapter.
"""

from .client import BtcMarketsClient  # noqa: F401
from .errors import (  # noqa: F401
    BtcMarketsError,
    CancelRejected,
    ConfigError,
    DecodeError,
    OrderRejected,
    PartialCancelFailure,
    RequestRejected,
    TransportError,
)
from .settings import BtcMarketsSettings  # noqa: F401
