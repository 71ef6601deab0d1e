"""
Synchronous HTTPS transport shared by exchange adapters.

A `RestTransport` owns one `httpx.Client` (connection pool, TLS settings) and
is constructed explicitly by the caller, then passed to the adapters that use
it. It is safe to share between adapters that call it one at a time.
"""

from __future__ import annotations

import logging
import ssl
from typing import Any, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when the exchange answers with a body that is not JSON."""

    def __init__(self, message: str, payload: Optional[dict] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class RestTransport:
    """GET/POST helper returning parsed JSON documents."""

    def __init__(
        self,
        base_url: str,
        *,
        cacert: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(
            base_url=self.base_url,
            verify=ssl.create_default_context(cafile=cacert) if cacert else True,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    def get(self, path: str) -> Any:
        response = self._client.get(path)
        return self._decode(response)

    def post(self, path: str, *, headers: Optional[Mapping[str, str]] = None) -> Any:
        response = self._client.post(path, headers=headers)
        return self._decode(response)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RestTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        # Exchange error documents are JSON too; hand them back so the caller
        # can inspect the embedded message regardless of the HTTP status.
        try:
            return response.json()
        except ValueError as exc:
            logger.debug(
                "Non-JSON response from %s (status %s)",
                response.request.url,
                response.status_code,
            )
            response.raise_for_status()
            raise TransportError(
                f"Invalid JSON from {response.request.url}: {exc}",
                payload={"status_code": response.status_code, "body": response.text[:200]},
            ) from exc
