"""
Abstract client definitions for centralized exchange integrations.

Concrete adapters (e.g. Bitfinex) should subclass `ExchangeClient` and
implement the trading primitives below. Adapters hold no order or position
state of their own: every call is an independent request/response cycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Protocol, runtime_checkable


NO_ORDER_ID = "0"


@dataclass(slots=True)
class ExchangeCredentials:
    """Typed container for exchange authentication data."""

    api_key: str
    api_secret: str
    passphrase: str | None = None


class Quote(NamedTuple):
    """Best bid/ask pair in quote currency. Missing sides are reported as 0.0."""

    bid: float
    ask: float


@runtime_checkable
class ExchangeClient(Protocol):
    """Protocol describing the surface area for exchange integrations."""

    name: str

    def authenticate(self, credentials: ExchangeCredentials) -> None:
        """Load credentials used to sign private requests."""

    def get_quote(self) -> Quote:
        """Return the current (bid, ask) pair for the configured symbol."""

    def get_available(self, currency: str) -> float:
        """Return the available trading balance for `currency` (0.0 when unknown)."""

    def send_order(self, side: str, quantity: float, price: float) -> str:
        """Submit a limit order and return the exchange order id ("0" when none)."""

    def is_order_complete(self, order_id: str) -> bool:
        """Return True once the order is no longer live on the exchange."""

    def get_active_position(self) -> float:
        """Return the signed size of the open position (0.0 when flat)."""

    def get_limit_price(self, volume: float, is_bid: bool) -> float:
        """Return the book price that absorbs `volume` scaled by the depth factor."""

    def close(self) -> None:
        """Release network resources."""
