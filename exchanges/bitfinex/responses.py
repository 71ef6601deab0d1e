"""
Inspection and field extraction for Bitfinex JSON responses.

Bitfinex reports failures as a JSON document carrying a ``message`` (or
``error``) field. These are logged and passed through untouched; operations
read whatever fields are present and choose their own defaults.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

logger = logging.getLogger(__name__)

ERROR_FIELDS = ("message", "error")


def check_response(document: Any) -> Any:
    """Log an embedded exchange error, if any, and return `document` unchanged."""
    if isinstance(document, dict):
        for key in ERROR_FIELDS:
            message = document.get(key)
            if message is not None:
                logger.error("<Bitfinex> Error with response: %s", message)
                break
    return document


def optional_float(document: Any, key: str) -> Optional[float]:
    """Return `document[key]` as a finite float, or None when absent or not numeric."""
    if not isinstance(document, dict):
        return None
    value = document.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def optional_int(document: Any, key: str) -> Optional[int]:
    """Return `document[key]` as an int, or None when absent or not integral."""
    if not isinstance(document, dict):
        return None
    value = document.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def optional_bool(document: Any, key: str) -> Optional[bool]:
    """Return `document[key]` only when it is a JSON boolean."""
    if not isinstance(document, dict):
        return None
    value = document.get(key)
    return value if isinstance(value, bool) else None
