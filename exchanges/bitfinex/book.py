"""
Order book parsing and depth-weighted limit price discovery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List

from exchanges.bitfinex.responses import optional_float

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class OrderBookLevel:
    """One (price, volume) entry on one side of the book."""

    price: float
    volume: float


def parse_book_side(document: Any, is_bid: bool) -> List[OrderBookLevel]:
    """
    Extract the bid or ask side of a ``/v1/book`` response, best price first.

    Levels arrive as ``{"price": "...", "amount": "...", "timestamp": "..."}``;
    unreadable prices or amounts count as 0.0.
    """
    side = document.get("bids" if is_bid else "asks") if isinstance(document, dict) else None
    if not isinstance(side, list):
        return []
    return [
        OrderBookLevel(
            price=optional_float(level, "price") or 0.0,
            volume=optional_float(level, "amount") or 0.0,
        )
        for level in side
    ]


def depth_weighted_price(levels: Iterable[OrderBookLevel], volume: float, depth_factor: float) -> float:
    """
    Walk the book until the cumulative volume covers ``|volume| * depth_factor``.

    Returns the price of the level reaching the threshold. When the book runs
    out first the last level's price is returned, which may understate the
    real fill cost on a thin book. An empty book yields 0.0.
    """
    target = abs(volume) * depth_factor
    logger.info("<Bitfinex> Looking for a limit price to fill %s...", abs(volume))
    cumulative = 0.0
    price = 0.0
    for level in levels:
        price = level.price
        logger.info("<Bitfinex> order book: %s@$%s", level.volume, level.price)
        cumulative += level.volume
        if cumulative >= target:
            break
    return price
