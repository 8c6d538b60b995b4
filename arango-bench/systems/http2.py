"""
ArangoDB over HTTP/2 using httpx.
"""

import logging
from typing import Any, Optional, Tuple

import httpx

from systems.base import ArangoSystem, ArangoError
from configuration import REQUEST_TIMEOUT_SECONDS, CONNECT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class HTTP2System(ArangoSystem):
    """HTTP/2 system. Cleartext endpoints use HTTP/2 with prior knowledge (h2c)."""

    protocol = "HTTP2"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.client: Optional[httpx.AsyncClient] = None

    async def _open(self) -> None:
        self.client = httpx.AsyncClient(
            http1=self.use_tls,  # h2c needs prior knowledge, TLS negotiates via ALPN
            http2=True,
            verify=False,  # self-signed server certificates are accepted
            auth=(self.username, self.password) if self.username else None,
            limits=httpx.Limits(max_connections=self.nr_connections),
            timeout=httpx.Timeout(REQUEST_TIMEOUT_SECONDS, connect=CONNECT_TIMEOUT_SECONDS),
        )

    async def _close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None

    async def _send(
        self, method: str, url: str, body: Optional[Any] = None
    ) -> Tuple[int, bytes]:
        if not self.client:
            raise RuntimeError("HTTP2 client not initialized. Use async context manager.")
        try:
            response = await self.client.request(method, url, json=body)
        except httpx.HTTPError as e:
            raise ArangoError(f"{method} {url} failed: {e}") from e
        return response.status_code, response.content
