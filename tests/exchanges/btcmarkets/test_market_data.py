import httpx
import pytest

from exchanges.btcmarkets.client import trades_path
from exchanges.btcmarkets.errors import ConfigError, DecodeError, RequestRejected, TransportError
from exchanges.btcmarkets.schemas import Ticker

TICK_PAYLOAD = {
    "bestBid": 45000.5,
    "bestAsk": 45010.0,
    "lastPrice": 45005.25,
    "currency": "AUD",
    "instrument": "BTC",
    "timestamp": 1700000000,
    "volume24h": 12.5,
}


def test_fetch_ticker_uses_public_market_path(make_client, requests_seen):
    client = make_client(lambda request: httpx.Response(200, json=TICK_PAYLOAD), authenticated=False)

    ticker = client.fetch_ticker("BTCAUD")

    request = requests_seen[0]
    assert request.method == "GET"
    assert request.url.path == "/market/BTC/AUD/tick"
    assert "signature" not in request.headers
    assert ticker == Ticker(
        best_bid=45000.5,
        best_ask=45010.0,
        last_price=45005.25,
        currency="AUD",
        instrument="BTC",
        timestamp=1700000000,
        volume_24h=12.5,
    )


def test_fetch_orderbook_keeps_exchange_ordering(make_client, requests_seen):
    payload = {
        "currency": "AUD",
        "instrument": "ETH",
        "timestamp": 1700000001,
        "bids": [[3000.0, 1.5], [2999.0, 2.0], [3001.0, 0.1]],
        "asks": [[3002.0, 0.5], [3005.0, 4.0]],
    }
    client = make_client(lambda request: httpx.Response(200, json=payload), authenticated=False)

    orderbook = client.fetch_orderbook("ethaud")

    assert requests_seen[0].url.path == "/market/ETH/AUD/orderbook"
    assert orderbook.bids == [(3000.0, 1.5), (2999.0, 2.0), (3001.0, 0.1)]
    assert orderbook.asks == [(3002.0, 0.5), (3005.0, 4.0)]
    assert orderbook.instrument == "ETH"


@pytest.mark.parametrize("since", [None, ""])
def test_fetch_trades_omits_empty_since(make_client, requests_seen, since):
    client = make_client(lambda request: httpx.Response(200, json=[]), authenticated=False)

    client.fetch_trades("BTCAUD", since=since)

    url = requests_seen[0].url
    assert url.path == "/market/BTC/AUD/trades"
    assert "since" not in url.params
    assert url.query == b""


def test_fetch_trades_appends_since(make_client, requests_seen):
    payload = [
        {"tid": 101, "amount": 0.5, "price": 45000.0, "date": 1700000000},
        {"tid": 102, "amount": 0.25, "price": 45001.0, "date": 1700000005},
    ]
    client = make_client(lambda request: httpx.Response(200, json=payload), authenticated=False)

    trades = client.fetch_trades("BTCAUD", since="12345")

    url = requests_seen[0].url
    assert url.query == b"since=12345"
    assert [trade.trade_id for trade in trades] == [101, 102]
    assert trades[1].price == 45001.0


def test_trades_path_construction():
    assert trades_path("BTCAUD") == "/market/BTC/AUD/trades"
    assert trades_path("BTCAUD", "") == "/market/BTC/AUD/trades"
    assert trades_path("BTCAUD", "12345") == "/market/BTC/AUD/trades?since=12345"
    assert trades_path("BTCAUD", 12345).count("since=") == 1


@pytest.mark.parametrize("pair", ["BTC", "BTCAUDX", "BTC-AU", ""])
def test_malformed_pair_is_rejected_before_any_request(make_client, requests_seen, pair):
    client = make_client(lambda request: httpx.Response(200, json=TICK_PAYLOAD), authenticated=False)

    with pytest.raises(ConfigError):
        client.fetch_ticker(pair)
    assert requests_seen == []


def test_market_data_is_not_retried(make_client, requests_seen):
    client = make_client(lambda request: httpx.Response(502, text="Bad Gateway"), authenticated=False)

    with pytest.raises(TransportError):
        client.fetch_ticker("BTCAUD")
    assert len(requests_seen) == 1


def test_unparseable_ticker_field_is_a_decode_error(make_client):
    payload = dict(TICK_PAYLOAD, bestBid="n/a")
    client = make_client(lambda request: httpx.Response(200, json=payload), authenticated=False)

    with pytest.raises(DecodeError) as excinfo:
        client.fetch_ticker("BTCAUD")
    assert excinfo.value.payload == {"body": payload}
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_trades_rejection_envelope_carries_exchange_message(make_client, caplog):
    client = make_client(
        lambda request: httpx.Response(
            200, json={"success": False, "errorCode": 3, "errorMessage": "Invalid argument."}
        ),
        authenticated=False,
    )

    with pytest.raises(RequestRejected) as excinfo:
        client.fetch_trades("BTCAUD", since="12345")

    assert excinfo.value.error_message == "Invalid argument."
    assert excinfo.value.error_code == 3
    assert "Invalid argument." in caplog.text
