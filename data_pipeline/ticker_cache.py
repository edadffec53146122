"""
Thread-safe pair -> ticker mapping shared between the poller and readers.
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, List, Optional

from exchanges.btcmarkets.schemas import Ticker


class TickerCache:
    """
    Latest ticker per pair.

    Writes are last-write-wins: when polling cycles overlap, a slow fetch from
    an older cycle may overwrite a newer value. Readers must accept a snapshot
    from any recent cycle.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._tickers: Dict[str, Ticker] = {}

    def set(self, pair: str, ticker: Ticker) -> None:
        with self._lock:
            self._tickers[pair] = ticker

    def get(self, pair: str) -> Optional[Ticker]:
        with self._lock:
            return self._tickers.get(pair)

    def snapshot(self) -> Dict[str, Ticker]:
        """Return a shallow copy safe to iterate without holding the lock."""
        with self._lock:
            return dict(self._tickers)

    def pairs(self) -> List[str]:
        with self._lock:
            return list(self._tickers)

    def __contains__(self, pair: object) -> bool:
        with self._lock:
            return pair in self._tickers

    def __len__(self) -> int:
        with self._lock:
            return len(self._tickers)
