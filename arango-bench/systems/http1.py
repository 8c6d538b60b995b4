"""
ArangoDB over HTTP/1.1 using aiohttp.
"""

import asyncio
import logging
from typing import Any, Optional, Tuple

import aiohttp

from systems.base import ArangoSystem, ArangoError
from configuration import REQUEST_TIMEOUT_SECONDS, CONNECT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class HTTPSystem(ArangoSystem):
    """HTTP/1.1 system with a connection pool limited to nr_connections."""

    protocol = "HTTP"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.session: Optional[aiohttp.ClientSession] = None

    async def _open(self) -> None:
        connector = aiohttp.TCPConnector(
            limit=self.nr_connections,
            limit_per_host=self.nr_connections,
            # TLS without certificate verification, as benchmark servers use self-signed certs
            ssl=False if self.use_tls else None,
        )
        auth = aiohttp.BasicAuth(self.username, self.password) if self.username else None
        self.session = aiohttp.ClientSession(
            connector=connector,
            auth=auth,
            timeout=aiohttp.ClientTimeout(
                total=REQUEST_TIMEOUT_SECONDS, connect=CONNECT_TIMEOUT_SECONDS
            ),
        )

    async def _close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    async def _send(
        self, method: str, url: str, body: Optional[Any] = None
    ) -> Tuple[int, bytes]:
        if not self.session:
            raise RuntimeError("HTTP session not initialized. Use async context manager.")
        try:
            async with self.session.request(method, url, json=body) as response:
                return response.status, await response.read()
        except asyncio.TimeoutError as e:
            raise ArangoError(f"{method} {url} timed out") from e
        except aiohttp.ClientError as e:
            raise ArangoError(f"{method} {url} failed: {e}") from e
