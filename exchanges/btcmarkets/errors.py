"""
Exception hierarchy for the BTC Markets adapter.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class BtcMarketsError(RuntimeError):
    """Base error for every failure raised by the BTC Markets client."""

    def __init__(self, message: str, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.payload = payload if payload is not None else {}


class ConfigError(BtcMarketsError):
    """Unusable configuration: bad secret encoding, malformed pair, disabled client."""


class TransportError(BtcMarketsError):
    """Network or HTTP failure while talking to the exchange."""


class DecodeError(BtcMarketsError):
    """The exchange answered with a body that is not valid JSON."""


class RequestRejected(BtcMarketsError):
    """The exchange processed the request but reported ``success: false``."""

    def __init__(
        self,
        message: str,
        *,
        error_message: str = "",
        error_code: Optional[int] = None,
        payload: Optional[Any] = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.error_message = error_message
        self.error_code = error_code


class OrderRejected(RequestRejected):
    """Order creation was refused by the exchange."""


class CancelRejected(RequestRejected):
    """A batch cancel request was refused as a whole."""


class PartialCancelFailure(BtcMarketsError):
    """The cancel request was accepted but not every order was cancelled."""

    def __init__(
        self,
        message: str,
        *,
        cancelled: Sequence[int] = (),
        failed: Sequence[int] = (),
        payload: Optional[Any] = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.cancelled = list(cancelled)
        self.failed = list(failed)
