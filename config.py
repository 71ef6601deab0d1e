"""
Runtime configuration for the Bitfinex adapter.

Every value can be overridden through the environment. Keep real credentials
out of version control; export them in the shell instead.
"""

import os

BITFINEX_API_URL = os.environ.get("BITFINEX_API_URL", "https://api.bitfinex.com")

# Credentials for signed endpoints. Empty values are still signed and sent;
# the exchange answers with an error message in that case.
BITFINEX_API_KEY = os.environ.get("BITFINEX_API_KEY", "")
BITFINEX_API_SECRET = os.environ.get("BITFINEX_API_SECRET", "")

# Optional CA bundle used to verify the TLS certificate. Empty means the
# default trust store shipped with httpx (certifi).
BITFINEX_CACERT = os.environ.get("BITFINEX_CACERT", "")

# Trading pair used by ticker, book and order endpoints.
BITFINEX_SYMBOL = os.environ.get("BITFINEX_SYMBOL", "btcusd")

# Multiplier applied to the target volume when scanning the order book.
ORDER_BOOK_FACTOR = float(os.environ.get("BITFINEX_ORDER_BOOK_FACTOR", "3.0"))

# HTTP timeout (seconds) applied by the transport.
HTTP_TIMEOUT = float(os.environ.get("BITFINEX_TIMEOUT", "10.0"))

# Log sink. Empty keeps logging on stderr only.
LOG_FILE = os.environ.get("BITFINEX_LOG_FILE", "")
LOG_LEVEL = os.environ.get("BITFINEX_LOG_LEVEL", "INFO")
