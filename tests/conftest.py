import base64
from typing import Callable, List

import httpx
import pytest

from exchanges.base_client import ExchangeCredentials
from exchanges.btcmarkets.client import BtcMarketsClient

BASE_URL = "https://api.btcmarkets.net"
RAW_SECRET = b"abc123"
ENCODED_SECRET = base64.b64encode(RAW_SECRET).decode()
API_KEY = "test-api-key"


@pytest.fixture
def requests_seen() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_client(requests_seen) -> Callable[..., BtcMarketsClient]:
    """
    Build a client whose transport is a handler function.

    Every request is appended to ``requests_seen`` before the handler runs.
    """
    clients: List[BtcMarketsClient] = []

    def factory(handler, *, authenticated: bool = True, **kwargs) -> BtcMarketsClient:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        http_client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(recording_handler))
        client = BtcMarketsClient(BASE_URL, http_client=http_client, **kwargs)
        if authenticated:
            client.authenticate(ExchangeCredentials(api_key=API_KEY, api_secret=ENCODED_SECRET))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
