"""
Bitfinex exchange adapter.

Submodules split the signed request pipeline (auth), response handling
(responses), order book pricing (book) and the trading client (client).
"""

from .client import BitfinexClient  # noqa: F401
