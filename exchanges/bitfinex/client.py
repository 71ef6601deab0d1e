"""
Bitfinex v1 REST trading client.

Public market data (ticker, order book) is fetched unauthenticated; balances,
orders and positions go through signed requests (see `auth`). Exchange error
documents are logged and never raised: operations degrade to 0.0 / "0" /
"still live" when a field is missing, so callers should read those values as
"unknown" rather than as a confirmed zero.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from exchanges.base_client import NO_ORDER_ID, ExchangeClient, ExchangeCredentials, Quote
from exchanges.bitfinex.auth import PROCESS_NONCE, NonceGenerator, build_auth_headers, sign_request
from exchanges.bitfinex.book import depth_weighted_price, parse_book_side
from exchanges.bitfinex.responses import check_response, optional_bool, optional_float, optional_int
from exchanges.transport import RestTransport

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.bitfinex.com"


@dataclass(slots=True)
class LimitOrder:
    """Normalized limit order accepted by the client."""

    side: str
    quantity: float
    price: float

    def to_fields(self, symbol: str) -> Dict[str, str]:
        return {
            "symbol": symbol,
            "amount": _format_decimal(self.quantity),
            "price": _format_decimal(self.price),
            "exchange": "bitfinex",
            "side": self.side,
            "type": "limit",
        }


class BitfinexClient(ExchangeClient):
    """Trading client for the Bitfinex REST API."""

    name = "bitfinex"

    def __init__(
        self,
        transport: RestTransport | None = None,
        *,
        credentials: ExchangeCredentials | None = None,
        base_url: str | None = None,
        cacert: str | None = None,
        timeout: float = 10.0,
        symbol: str = "btcusd",
        depth_factor: float = 1.0,
        nonce: NonceGenerator | None = None,
    ) -> None:
        if depth_factor <= 0:
            raise ValueError("depth_factor must be positive")
        self._owns_transport = transport is None
        self._transport = transport or RestTransport(
            base_url or DEFAULT_BASE_URL,
            cacert=cacert,
            timeout=timeout,
        )
        self._credentials = credentials
        self._nonce = nonce if nonce is not None else PROCESS_NONCE
        self.symbol = symbol
        self.depth_factor = depth_factor

    # ---------------------------------------------------------------------
    # ExchangeClient API
    # ---------------------------------------------------------------------
    def authenticate(self, credentials: ExchangeCredentials) -> None:
        self._credentials = credentials

    def get_quote(self) -> Quote:
        response = self._public_request(f"/v1/ticker/{self.symbol}")
        return Quote(
            bid=optional_float(response, "bid") or 0.0,
            ask=optional_float(response, "ask") or 0.0,
        )

    def get_available(self, currency: str) -> float:
        """
        Return the "trading" wallet amount for `currency`.

        The first matching entry in response order wins. Entries missing a
        string type, currency or amount are logged and skipped.
        """
        response = self._auth_request("/v1/balances")
        if not isinstance(response, list):
            return 0.0
        wanted = currency.lower()
        for entry in response:
            balance = _decode_balance(entry)
            if balance is None:
                logger.warning("<Bitfinex> Error with JSON: unexpected balance entry %r", entry)
                continue
            entry_type, entry_currency, amount = balance
            if entry_type == "trading" and entry_currency.lower() == wanted:
                return amount
        return 0.0

    def send_order(self, side: str, quantity: float, price: float) -> str:
        order = self._normalize_order(side, quantity, price)
        logger.info(
            '<Bitfinex> Trying to send a "%s" limit order: %s@$%s...',
            order.side,
            order.quantity,
            order.price,
        )
        response = self._auth_request("/v1/order/new", order.to_fields(self.symbol))
        order_id = str(optional_int(response, "order_id") or 0)
        logger.info("<Bitfinex> Done (order ID: %s)", order_id)
        return order_id

    def send_long_order(self, side: str, quantity: float, price: float) -> str:
        return self.send_order(side, quantity, price)

    def send_short_order(self, side: str, quantity: float, price: float) -> str:
        return self.send_order(side, quantity, price)

    def is_order_complete(self, order_id: str) -> bool:
        if order_id == NO_ORDER_ID:
            return True
        try:
            numeric_id = int(order_id)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Order id must be an integer string, got {order_id!r}") from exc
        response = self._auth_request("/v1/order/status", {"order_id": numeric_id})
        # Only an explicit false means done; a missing flag is treated as live.
        return optional_bool(response, "is_live") is False

    def get_active_position(self) -> float:
        response = self._auth_request("/v1/positions")
        if not isinstance(response, list) or not response:
            logger.warning("<Bitfinex> WARNING: %s position not available, return 0.0", self._base_currency())
            return 0.0
        return optional_float(response[0], "amount") or 0.0

    def get_limit_price(self, volume: float, is_bid: bool) -> float:
        response = self._public_request(f"/v1/book/{self.symbol}")
        levels = parse_book_side(response, is_bid)
        return depth_weighted_price(levels, volume, self.depth_factor)

    def close(self) -> None:
        # A transport passed in by the caller may be shared with other adapters.
        if self._owns_transport:
            self._transport.close()
        self._credentials = None

    def __enter__(self) -> "BitfinexClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _public_request(self, path: str) -> Any:
        return check_response(self._transport.get(path))

    def _auth_request(self, path: str, fields: Optional[Dict[str, Any]] = None) -> Any:
        if self._credentials is None:
            raise RuntimeError("Client has not been authenticated")
        signed = sign_request(self._credentials, path, self._nonce.next(), fields)
        headers = build_auth_headers(self._credentials, signed)
        return check_response(self._transport.post(path, headers=headers))

    def _base_currency(self) -> str:
        return self.symbol[:3].upper()

    @staticmethod
    def _normalize_order(side: str, quantity: float, price: float) -> LimitOrder:
        if not side:
            raise ValueError("Order side is required")
        # Checked on the wire representation: 8 decimals can round a tiny value to "0".
        for label, value in (("Order quantity", quantity), ("Limit price", price)):
            if value is None or not math.isfinite(value) or _format_decimal(value) == "0" or value <= 0:
                raise ValueError(f"{label} must be greater than zero, got {value}")
        return LimitOrder(side=side, quantity=float(quantity), price=float(price))


def _decode_balance(entry: Any) -> Optional[tuple[str, str, float]]:
    if not isinstance(entry, dict):
        return None
    entry_type = entry.get("type")
    entry_currency = entry.get("currency")
    raw_amount = entry.get("amount")
    if not all(isinstance(value, str) for value in (entry_type, entry_currency, raw_amount)):
        return None
    try:
        amount = float(raw_amount)
    except ValueError:
        return None
    if not math.isfinite(amount):
        return None
    return entry_type, entry_currency, amount


def _format_decimal(value: float) -> str:
    text = f"{value:.8f}".rstrip("0").rstrip(".")
    return text or "0"
