"""
BTC Markets REST client with market data, signed order management, and balances.

Public market data goes through unauthenticated GETs. Trading and account
endpoints are signed with HMAC-SHA512 (see ``exchanges.btcmarkets.signer``).
There is deliberately no retry or backoff: every call hits the network once.
"""

from __future__ import annotations

import json
import logging
import urllib.parse
from typing import Any, Callable, Iterable, List, Literal, Optional, Sequence

import httpx

from exchanges.base_client import ExchangeClient, ExchangeCredentials
from exchanges.btcmarkets.errors import (
    CancelRejected,
    ConfigError,
    DecodeError,
    OrderRejected,
    PartialCancelFailure,
    RequestRejected,
    TransportError,
)
from exchanges.btcmarkets.pairs import split_pair
from exchanges.btcmarkets.schemas import (
    Balance,
    CancelResponse,
    Order,
    Orderbook,
    OrderRequest,
    OrderResponse,
    OrderTrade,
    Ticker,
    Trade,
)
from exchanges.btcmarkets.settings import DEFAULT_BASE_URL, EXCHANGE_NAME, BtcMarketsSettings
from exchanges.btcmarkets.signer import build_canonical_string, decode_secret, generate_nonce, sign

logger = logging.getLogger(__name__)

ACCOUNT_BALANCE = "/account/balance"
ORDER_CREATE = "/order/create"
ORDER_CANCEL = "/order/cancel"
ORDER_HISTORY = "/order/history"
ORDER_OPEN = "/order/open"
ORDER_TRADE_HISTORY = "/order/trade/history"
ORDER_DETAIL = "/order/detail"

ORDER_SIDES = ("Bid", "Ask")
ORDER_TYPES = ("Limit", "Market")


class BtcMarketsClient(ExchangeClient):
    """Synchronous client for the BTC Markets REST API."""

    name = EXCHANGE_NAME

    def __init__(
        self,
        base_url: str | None = None,
        *,
        enabled: bool = True,
        verbose: bool = False,
        fee: float = 0.85,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url or DEFAULT_BASE_URL
        self._client = http_client or httpx.Client(base_url=self._base_url, timeout=timeout)
        self._credentials: ExchangeCredentials | None = None
        self._secret: bytes | None = None
        self.enabled = enabled
        self.verbose = verbose
        self.fee = fee

    @classmethod
    def from_settings(
        cls,
        settings: BtcMarketsSettings,
        *,
        http_client: httpx.Client | None = None,
    ) -> "BtcMarketsClient":
        """
        Build a client from settings, loading credentials when both are present.

        A secret that fails to decode leaves the client disabled rather than
        raising, so the caller can still inspect it.
        """
        client = cls(
            settings.base_url,
            enabled=settings.enabled,
            verbose=settings.verbose,
            fee=settings.fee,
            http_client=http_client,
        )
        if settings.authenticated_api_support:
            try:
                client.authenticate(
                    ExchangeCredentials(api_key=settings.api_key, api_secret=settings.api_secret)
                )
            except ConfigError:
                pass
        return client

    # ---------------------------------------------------------------------
    # ExchangeClient API
    # ---------------------------------------------------------------------
    @property
    def is_authenticated(self) -> bool:
        return self._credentials is not None and self._secret is not None

    def authenticate(self, credentials: ExchangeCredentials) -> None:
        try:
            secret = decode_secret(credentials.api_secret)
        except ConfigError:
            logger.error("%s unable to decode secret key.", self.name)
            self.enabled = False
            self._credentials = None
            self._secret = None
            raise
        self._credentials = credentials
        self._secret = secret

    def get_fee(self) -> float:
        return self.fee

    def close(self) -> None:
        self._client.close()
        self._credentials = None
        self._secret = None

    # ------------------------------------------------------------------
    # Market data
    # ------------------------------------------------------------------
    def fetch_ticker(self, pair: str) -> Ticker:
        """Return the latest ticker for a pair such as ``BTCAUD``."""
        path = _market_path(pair, "tick")
        payload = self._check_envelope(path, self._get(path))
        return _decode(Ticker.from_payload, _as_dict(payload), path)

    def fetch_orderbook(self, pair: str) -> Orderbook:
        path = _market_path(pair, "orderbook")
        payload = self._check_envelope(path, self._get(path))
        return _decode(Orderbook.from_payload, _as_dict(payload), path)

    def fetch_trades(self, pair: str, since: str | int | None = None) -> List[Trade]:
        """
        Return recent public trades, optionally only those after trade id ``since``.

        An empty ``since`` is treated as absent; the parameter is never sent blank.
        """
        path = trades_path(pair, since)
        payload = self._check_envelope(path, self._get(path))
        if not isinstance(payload, list):
            raise DecodeError("Expected a list of trades", payload={"body": payload})
        return [_decode(Trade.from_payload, item, path) for item in payload]

    # ------------------------------------------------------------------
    # Order management
    # ------------------------------------------------------------------
    def place_order(
        self,
        currency: str,
        instrument: str,
        price: int,
        volume: int,
        side: Literal["Bid", "Ask"],
        order_type: Literal["Limit", "Market"],
        client_request_id: str,
    ) -> int:
        if side not in ORDER_SIDES:
            raise ValueError(f"Unsupported order side {side!r}; expected one of {ORDER_SIDES}")
        if order_type not in ORDER_TYPES:
            raise ValueError(f"Unsupported order type {order_type!r}; expected one of {ORDER_TYPES}")
        order = OrderRequest(
            currency=currency.upper(),
            instrument=instrument.upper(),
            price=int(price),
            volume=int(volume),
            side=side,
            order_type=order_type,
            client_request_id=client_request_id,
        )
        payload = self._request("POST", ORDER_CREATE, json_body=order.to_payload())
        response = OrderResponse.from_payload(_as_dict(payload))
        if not response.success:
            raise OrderRejected(
                f"{self.name} unable to place order. Error message: {response.error_message}",
                error_message=response.error_message,
                error_code=response.error_code,
                payload=payload,
            )
        return response.id

    def cancel_orders(self, order_ids: Sequence[int]) -> bool:
        """
        Cancel a batch of orders.

        The top-level ``success`` only says the request was accepted; each id
        is then checked individually and anything short of all of them being
        cancelled raises ``PartialCancelFailure``.
        """
        ids = [int(order_id) for order_id in order_ids]
        if not ids:
            raise ValueError("At least one order id is required to cancel")
        payload = self._request("POST", ORDER_CANCEL, json_body={"orderIds": ids})
        response = CancelResponse.from_payload(_as_dict(payload))
        if not response.success:
            raise CancelRejected(
                f"{self.name} unable to cancel order. Error message: {response.error_message}",
                error_message=response.error_message,
                error_code=response.error_code,
                payload=payload,
            )

        cancelled_ids = set()
        for item in response.responses:
            if item.success:
                cancelled_ids.add(item.id)
                logger.info("%s cancelled order %d.", self.name, item.id)
            else:
                logger.warning(
                    "%s unable to cancel order %d. Error message: %s",
                    self.name,
                    item.id,
                    item.error_message,
                )

        # Only requested ids count; duplicates and strays in the reply do not.
        failed = [order_id for order_id in ids if order_id not in cancelled_ids]
        if not failed:
            return True
        cancelled = [order_id for order_id in dict.fromkeys(ids) if order_id in cancelled_ids]
        raise PartialCancelFailure(
            f"{self.name} unable to cancel order(s): {failed}",
            cancelled=cancelled,
            failed=failed,
            payload=payload,
        )

    def fetch_orders(
        self,
        currency: str,
        instrument: str,
        limit: int = 10,
        since: int = 0,
        historic: bool = False,
    ) -> List[Order]:
        """Return open orders, or the order history when ``historic`` is set."""
        path = ORDER_HISTORY if historic else ORDER_OPEN
        body = {
            "currency": currency.upper(),
            "instrument": instrument.upper(),
            "limit": int(limit),
            "since": int(since),
        }
        payload = _as_dict(self._query("POST", path, body))
        return [Order.from_payload(item) for item in payload.get("orders") or []]

    def fetch_order_detail(self, order_ids: Iterable[int]) -> List[Order]:
        body = {"orderIds": [int(order_id) for order_id in order_ids]}
        payload = _as_dict(self._query("POST", ORDER_DETAIL, body))
        return [Order.from_payload(item) for item in payload.get("orders") or []]

    def fetch_trade_history(
        self,
        currency: str,
        instrument: str,
        limit: int = 10,
        since: int = 0,
    ) -> List[OrderTrade]:
        """Return the account's own fills for a pair."""
        body = {
            "currency": currency.upper(),
            "instrument": instrument.upper(),
            "limit": int(limit),
            "since": int(since),
        }
        payload = _as_dict(self._query("POST", ORDER_TRADE_HISTORY, body))
        return [OrderTrade.from_payload(item) for item in payload.get("trades") or []]

    def fetch_balances(self) -> List[Balance]:
        payload = self._query("GET", ACCOUNT_BALANCE)
        if not isinstance(payload, list):
            raise DecodeError("Expected a list of balances", payload={"body": payload})
        return [_decode(Balance.from_payload, item, ACCOUNT_BALANCE) for item in payload]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _query(self, method: Literal["GET", "POST"], path: str, json_body: Optional[dict] = None) -> Any:
        try:
            payload = self._request(method, path, json_body=json_body)
        except (TransportError, DecodeError) as exc:
            logger.warning("%s %s %s failed: %s", self.name, method, path, exc)
            raise
        return self._check_envelope(path, payload)

    def _check_envelope(self, path: str, payload: Any) -> Any:
        """Raise ``RequestRejected`` for a ``success: false`` envelope, else pass it through."""
        if isinstance(payload, dict) and payload.get("success") is False:
            message = payload.get("errorMessage") or ""
            logger.warning("%s %s rejected: %s", self.name, path, message)
            raise RequestRejected(
                f"{self.name} request to {path} rejected. Error message: {message}",
                error_message=message,
                error_code=payload.get("errorCode"),
                payload=payload,
            )
        return payload

    def _request(
        self,
        method: Literal["GET", "POST"],
        path: str,
        json_body: Optional[dict] = None,
    ) -> Any:
        if not self.enabled:
            raise ConfigError(f"{self.name} client is disabled")
        if not self.is_authenticated:
            raise ConfigError("Client has not been authenticated")

        body_text = json.dumps(json_body, separators=(",", ":")) if json_body is not None else None
        nonce = generate_nonce()
        signature = sign(self._secret, path, nonce, body_text)

        if self.verbose:
            logger.info(
                "Sending %s request to URL %s with params %r",
                method,
                self._base_url + path,
                build_canonical_string(path, nonce, body_text),
            )

        headers = {
            "Accept": "application/json",
            "Accept-Charset": "UTF-8",
            "Content-Type": "application/json",
            "apikey": self._credentials.api_key,
            "timestamp": nonce,
            "signature": signature,
        }
        return self._send(method, path, headers=headers, content=body_text)

    def _get(self, path: str) -> Any:
        return self._send("GET", path)

    def _send(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[dict] = None,
        content: Optional[str] = None,
    ) -> Any:
        try:
            response = self._client.request(method, path, content=content, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"{self.name} {method} {path} failed: {exc}") from exc

        if self.verbose:
            logger.info("Received raw: %s", response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(
                f"{self.name} returned malformed JSON for {path}: {exc}",
                payload={"body": response.text},
            ) from exc


def _market_path(pair: str, endpoint: str) -> str:
    instrument, currency = split_pair(pair)
    return f"/market/{instrument}/{currency}/{endpoint}"


def trades_path(pair: str, since: str | int | None = None) -> str:
    path = _market_path(pair, "trades")
    if since is None or str(since) == "":
        return path
    return f"{path}?{urllib.parse.urlencode({'since': since})}"


def _as_dict(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise DecodeError("Expected a JSON object in the response envelope", payload={"body": payload})
    return payload


def _decode(parser: Callable[[Any], Any], payload: Any, path: str) -> Any:
    try:
        return parser(payload)
    except (AttributeError, TypeError, ValueError, KeyError, IndexError) as exc:
        raise DecodeError(
            f"Unexpected payload shape for {path}: {exc}",
            payload={"body": payload},
        ) from exc
