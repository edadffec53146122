import pytest
from fastapi.testclient import TestClient

from data_pipeline.exchange_info import ExchangeInfoStore
from data_pipeline.ticker_cache import TickerCache
from exchanges.btcmarkets.schemas import Ticker
from exchanges.btcmarkets.settings import BtcMarketsSettings
from services.webapp.dependencies import get_exchange_info_store, get_settings, get_ticker_cache
from services.webapp.main import app


@pytest.fixture
def cache():
    cache = TickerCache()
    cache.set(
        "BTCAUD",
        Ticker(
            best_bid=45000.0,
            best_ask=45010.0,
            last_price=45005.0,
            currency="AUD",
            instrument="BTC",
            timestamp=1700000000,
        ),
    )
    return cache


@pytest.fixture
def store():
    store = ExchangeInfoStore()
    store.record("BTC Markets", "BTC", "AUD", 45005.0, 0)
    store.record("BTC Markets", "BTC", "USD", 29703.3, 0)
    return store


@pytest.fixture
def http(cache, store):
    app.dependency_overrides[get_ticker_cache] = lambda: cache
    app.dependency_overrides[get_exchange_info_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: BtcMarketsSettings(
        api_key="key", api_secret="c2VjcmV0", enabled_pairs=["BTCAUD"]
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(http):
    assert http.get("/health").json() == {"status": "ok"}


def test_list_tickers(http):
    payload = http.get("/tickers").json()
    assert list(payload) == ["BTCAUD"]
    assert payload["BTCAUD"]["last_price"] == 45005.0


def test_get_ticker_normalizes_pair(http):
    response = http.get("/tickers/btcaud")
    assert response.status_code == 200
    assert response.json()["best_bid"] == 45000.0


def test_get_ticker_not_yet_polled(http):
    assert http.get("/tickers/ETHAUD").status_code == 404


def test_get_ticker_rejects_malformed_pair(http):
    assert http.get("/tickers/BTC").status_code == 400


def test_exchange_info(http):
    payload = http.get("/exchange-info").json()
    assert [(item["base_currency"], item["quote_currency"]) for item in payload] == [
        ("BTC", "AUD"),
        ("BTC", "USD"),
    ]
    assert payload[1]["price"] == 29703.3


def test_settings_do_not_leak_credentials(http):
    payload = http.get("/settings").json()
    assert payload["fee"] == 0.85
    assert "api_secret" not in payload
