"""
HTTP transport seam

The dispatcher depends on the Transport protocol, not on httpx directly, so
tests can plug in an in-memory transport and callers can bring their own
client (custom TLS, proxies, connection limits).
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Protocol, Tuple, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Async HTTP transport"""

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: float,
    ) -> Tuple[int, bytes]:
        """
        Issue one request and return (status code, raw body)

        Raises:
            Exception: On failures before a response arrives (connection
                refused, DNS, TLS, timeout). The dispatcher maps these to
                TransportError.
        """
        ...


class HttpxTransport:
    """
    Default transport using a shared httpx.AsyncClient

    The client is created on first use and reused so connections are pooled
    across calls. Call aclose() when done.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async client"""
        if self._client is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self._client

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: float,
    ) -> Tuple[int, bytes]:
        client = self._get_client()
        response = await client.request(
            method,
            url,
            headers=dict(headers),
            content=body,
            timeout=timeout,
        )
        return response.status_code, response.content

    async def aclose(self) -> None:
        """
        Close the underlying client if this transport created it

        An injected client stays referenced and open; its owner closes it.
        """
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
