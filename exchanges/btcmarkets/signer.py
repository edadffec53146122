"""
Request signing for BTC Markets authenticated endpoints.

The exchange verifies an HMAC-SHA512 over ``path\\nnonce\\nbody`` keyed by the
decoded API secret, transmitted base64-encoded in the ``signature`` header.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import time
from typing import Optional, Union

from exchanges.btcmarkets.errors import ConfigError

NONCE_DIGITS = 13


def generate_nonce() -> str:
    """Return the current time in nanoseconds truncated to its leading 13 digits."""
    return str(time.time_ns())[:NONCE_DIGITS]


def build_canonical_string(path: str, nonce: str, body: Optional[str] = None) -> str:
    if body is None:
        return f"{path}\n{nonce}\n"
    return f"{path}\n{nonce}\n{body}"


def sign(
    secret: Union[bytes, str],
    path: str,
    nonce: str,
    body: Optional[str] = None,
) -> str:
    """Create the base64 HMAC-SHA512 signature for a request."""
    key = secret.encode("utf-8") if isinstance(secret, str) else secret
    message = build_canonical_string(path, nonce, body)
    mac = hmac.new(key, message.encode("utf-8"), hashlib.sha512)
    return base64.b64encode(mac.digest()).decode("utf-8")


def decode_secret(encoded: str) -> bytes:
    """Decode the at-rest (base64) API secret into the raw HMAC key."""
    if not encoded:
        raise ConfigError("API secret is empty")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigError(f"Unable to decode API secret: {exc}") from exc
