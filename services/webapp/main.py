"""
Entrypoint for the BTC Markets ticker reporting web service.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI

from services.webapp import routes
from services.webapp.dependencies import get_poller

app = FastAPI(
    title="btcmarkets-bridge",
    description="BTC Markets ticker polling and reporting service",
    version="0.1.0",
)

logger = logging.getLogger(__name__)

app.include_router(routes.router)

_POLLER_TASK: Optional[asyncio.Task] = None


@app.on_event("startup")
async def _startup() -> None:
    global _POLLER_TASK
    poller = get_poller()
    if not poller.pairs:
        logger.warning("No enabled currency pairs configured; ticker poller not started.")
        return
    if not poller.client.enabled:
        logger.warning("%s client is disabled; ticker poller not started.", poller.client.name)
        return
    _POLLER_TASK = asyncio.create_task(poller.run(), name="ticker-poller")
    logger.info("Ticker poller started for %d pairs.", len(poller.pairs))


@app.on_event("shutdown")
async def _shutdown() -> None:
    global _POLLER_TASK
    poller = get_poller()
    poller.stop()
    if _POLLER_TASK is not None:
        _POLLER_TASK.cancel()
        try:
            await _POLLER_TASK
        except asyncio.CancelledError:
            pass
        _POLLER_TASK = None
    if poller.pending:
        logger.info("%d ticker fetches still in flight at shutdown.", poller.pending)
