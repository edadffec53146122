"""
Background loop that keeps the ticker cache fresh for every enabled pair.

Each cycle launches one task per pair and immediately goes back to sleep; the
driver never waits for the fetches. Cycles can therefore overlap when the
exchange is slower than the polling delay, in which case the cache keeps
whichever write landed last.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Sequence, Set

from data_pipeline.currency import ConversionError, CurrencyConverter, StaticRateConverter
from data_pipeline.exchange_info import ExchangeInfoSink, ExchangeInfoStore
from data_pipeline.ticker_cache import TickerCache
from exchanges.btcmarkets.client import BtcMarketsClient
from exchanges.btcmarkets.errors import BtcMarketsError
from exchanges.btcmarkets.pairs import normalize_pairs, split_pair
from exchanges.btcmarkets.schemas import Ticker

logger = logging.getLogger(__name__)

RefreshHook = Callable[[str, Optional[Ticker], Optional[BaseException]], None]

STATE_IDLE = "idle"
STATE_POLLING = "polling"
STATE_STOPPED = "stopped"


class TickerPoller:
    """Polls BTC Markets tickers and republishes them to the cache and sink."""

    def __init__(
        self,
        client: BtcMarketsClient,
        cache: TickerCache,
        *,
        pairs: Sequence[str],
        polling_delay: float = 10.0,
        converter: CurrencyConverter | None = None,
        sink: ExchangeInfoSink | None = None,
        reporting_currency: str = "USD",
        on_refresh: RefreshHook | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.pairs: List[str] = normalize_pairs(pairs)
        self.polling_delay = max(0.0, float(polling_delay))
        self.converter = converter or StaticRateConverter({})
        self.sink = sink or ExchangeInfoStore()
        self.reporting_currency = reporting_currency.upper()
        self.on_refresh = on_refresh
        self.state = STATE_IDLE
        self._stop_requested = False
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of fan-out tasks still in flight."""
        return len(self._pending)

    def should_poll(self) -> bool:
        return self.client.enabled and not self._stop_requested

    async def run(self) -> None:
        """Poll until the client is disabled or ``stop()`` is called."""
        if self.state != STATE_IDLE:
            raise RuntimeError("Ticker poller can only be started once")
        self.state = STATE_POLLING

        if self.client.verbose:
            logger.info("%s polling delay: %ss.", self.client.name, self.polling_delay)
            logger.info(
                "%s %d currencies enabled: %s.",
                self.client.name,
                len(self.pairs),
                ", ".join(self.pairs),
            )

        try:
            while self.should_poll():
                self.run_cycle()
                await asyncio.sleep(self.polling_delay)
        finally:
            self.state = STATE_STOPPED

    def stop(self) -> None:
        """
        Prevent new cycles from starting; in-flight fetches still complete.

        The client itself stays enabled so other callers sharing it (the
        trading endpoints) keep working.
        """
        self._stop_requested = True

    def run_cycle(self) -> List[asyncio.Task]:
        """Launch one refresh task per pair without waiting for them."""
        tasks: List[asyncio.Task] = []
        for pair in self.pairs:
            task = asyncio.create_task(self._refresh(pair), name=f"ticker-{pair}")
            self._pending.add(task)
            task.add_done_callback(self._on_task_done)
            tasks.append(task)
        return tasks

    async def wait_pending(self) -> None:
        """Wait for every fan-out task launched so far (shutdown and tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _refresh(self, pair: str) -> None:
        ticker: Ticker | None = None
        error: BaseException | None = None
        try:
            try:
                ticker = await asyncio.to_thread(self.client.fetch_ticker, pair)
            except BtcMarketsError as exc:
                error = exc
                logger.warning("%s %s ticker fetch failed: %s", self.client.name, pair, exc)
                return
            self._publish(pair, ticker)
        except Exception as exc:
            # The hook sees every failure; the task still ends in error.
            error = exc
            raise
        finally:
            self._notify(pair, ticker, error)

    def _publish(self, pair: str, ticker: Ticker) -> None:
        self.cache.set(pair, ticker)
        base, quote = split_pair(pair)

        last_converted = self._convert(ticker.last_price, quote)
        bid_converted = self._convert(ticker.best_bid, quote)
        ask_converted = self._convert(ticker.best_ask, quote)
        logger.info(
            "%s %s: Last %f (%f) Bid %f (%f) Ask %f (%f)",
            self.client.name,
            pair,
            last_converted,
            ticker.last_price,
            bid_converted,
            ticker.best_bid,
            ask_converted,
            ticker.best_ask,
        )

        self.sink.record(self.client.name, base, quote, ticker.last_price, 0)
        self.sink.record(self.client.name, base, self.reporting_currency, last_converted, 0)

    def _convert(self, amount: float, currency: str) -> float:
        try:
            return self.converter.convert(amount, currency, self.reporting_currency)
        except ConversionError as exc:
            logger.warning(
                "Unable to convert %s to %s: %s", currency, self.reporting_currency, exc
            )
            return 0.0

    def _notify(self, pair: str, ticker: Ticker | None, error: BaseException | None) -> None:
        if self.on_refresh is None:
            return
        try:
            self.on_refresh(pair, ticker, error)
        except Exception:
            logger.exception("Ticker refresh hook failed for %s", pair)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Ticker task %s crashed: %r", task.get_name(), exc)
