"""
Fixed-width currency pair helpers (``BTCAUD`` -> ``BTC`` / ``AUD``).
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from exchanges.btcmarkets.errors import ConfigError

PAIR_LENGTH = 6


def split_pair(symbol: str) -> Tuple[str, str]:
    """
    Return ``(instrument, currency)`` for a six character pair symbol.

    BTC Markets pairs carry no delimiter, so anything that is not exactly six
    alphanumeric characters is rejected instead of being sliced incorrectly.
    """
    normalized = (symbol or "").strip().upper()
    if len(normalized) != PAIR_LENGTH or not normalized.isalnum():
        raise ConfigError(f"Invalid currency pair {symbol!r}: expected 6 characters such as BTCAUD")
    return normalized[:3], normalized[3:]


def normalize_pairs(symbols: Iterable[str]) -> List[str]:
    """Upper-case, validate, and de-duplicate pairs while keeping their order."""
    seen: set[str] = set()
    normalized: List[str] = []
    for value in symbols:
        if not value or not value.strip():
            continue
        instrument, currency = split_pair(value)
        pair = instrument + currency
        if pair in seen:
            continue
        seen.add(pair)
        normalized.append(pair)
    return normalized
