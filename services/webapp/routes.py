"""
HTTP route handlers for the FastAPI web application.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from data_pipeline.exchange_info import ExchangeInfoStore
from data_pipeline.ticker_cache import TickerCache
from exchanges.btcmarkets.errors import ConfigError
from exchanges.btcmarkets.pairs import split_pair
from exchanges.btcmarkets.settings import BtcMarketsSettings
from services.webapp.dependencies import get_exchange_info_store, get_settings, get_ticker_cache

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", summary="Service health probe")
def health_check() -> dict:
    """Return a static payload for uptime checks."""
    return {"status": "ok"}


@router.get(
    "/tickers",
    response_model=dict,
    summary="Latest ticker snapshot for every polled pair",
)
def list_tickers(cache: TickerCache = Depends(get_ticker_cache)) -> dict:
    """Values may come from any recent polling cycle."""
    return {pair: asdict(ticker) for pair, ticker in sorted(cache.snapshot().items())}


@router.get(
    "/tickers/{pair}",
    response_model=dict,
    summary="Latest ticker snapshot for a single pair",
)
def get_ticker(pair: str, cache: TickerCache = Depends(get_ticker_cache)) -> dict:
    try:
        instrument, currency = split_pair(pair)
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    ticker = cache.get(instrument + currency)
    if ticker is None:
        raise HTTPException(status_code=404, detail="Ticker not available yet")
    return asdict(ticker)


@router.get(
    "/exchange-info",
    response_model=List[dict],
    summary="Latest aggregated prices per exchange and currency pair",
)
def list_exchange_info(store: ExchangeInfoStore = Depends(get_exchange_info_store)) -> list[dict]:
    entries = sorted(store.list(), key=lambda info: (info.base_currency, info.quote_currency))
    return [
        {
            **asdict(info),
            "updated_at": info.updated_at.isoformat(),
        }
        for info in entries
    ]


@router.get("/settings", summary="Non-secret adapter configuration")
def get_adapter_settings(settings: BtcMarketsSettings = Depends(get_settings)) -> dict:
    return settings.public_view()
