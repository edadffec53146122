import threading

import pytest

from data_pipeline.currency import ConversionError, StaticRateConverter
from data_pipeline.exchange_info import ExchangeInfoStore
from data_pipeline.ticker_cache import TickerCache
from exchanges.btcmarkets.schemas import Ticker


def test_static_rate_converter_goes_through_usd():
    converter = StaticRateConverter({"AUD": 0.66, "EUR": 1.1})

    assert converter.convert(100, "AUD", "USD") == pytest.approx(66.0)
    assert converter.convert(110, "EUR", "AUD") == pytest.approx(110 * 1.1 / 0.66)
    assert converter.convert(5, "btc", "BTC") == 5.0


def test_static_rate_converter_unknown_currency():
    with pytest.raises(ConversionError):
        StaticRateConverter({"AUD": 0.66}).convert(1, "NZD", "USD")


def test_exchange_info_store_keeps_latest_observation():
    store = ExchangeInfoStore()
    store.record("BTC Markets", "btc", "aud", 1.0, 0)
    store.record("BTC Markets", "BTC", "AUD", 2.0, 0)

    assert len(store.list()) == 1
    assert store.get("BTC Markets", "BTC", "AUD").price == 2.0
    assert store.get("BTC Markets", "ETH", "AUD") is None


def test_ticker_cache_concurrent_writers_on_disjoint_keys():
    cache = TickerCache()
    pairs = [f"C{i:02d}AUD" for i in range(20)]

    def writer(pair):
        for price in range(50):
            cache.set(pair, Ticker(price, price, float(price), "AUD", pair[:3], price))

    threads = [threading.Thread(target=writer, args=(pair,)) for pair in pairs]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = cache.snapshot()
    assert sorted(snapshot) == sorted(pairs)
    assert all(ticker.last_price == 49.0 for ticker in snapshot.values())
