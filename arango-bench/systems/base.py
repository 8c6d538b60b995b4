"""
Async base class for ArangoDB systems: the REST calls the scenarios need over a pluggable transport.
"""

import json
import logging
from typing import Any, AsyncIterator, Dict, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

from common.errors import BenchmarkError

logger = logging.getLogger(__name__)

# Go driver style schemes map onto plain HTTP(S)
_SCHEME_ALIASES = {"tcp": "http", "ssl": "https"}

HTTP_NOT_FOUND: int = 404


class ArangoError(BenchmarkError):
    """A request to the server failed, either at transport level or with an error response."""

    def __init__(self, message: str, status: int = 0, error_num: int = 0):
        super().__init__(message)
        self.status = status
        self.error_num = error_num

    def __str__(self) -> str:
        message = super().__str__()
        if self.status:
            return f"{message} (HTTP {self.status}, errorNum {self.error_num})"
        return message


def normalize_endpoint(endpoint: str, use_tls: bool = False) -> str:
    """Turn an endpoint into an http(s) base URL without trailing slash.

    Accepts 'tcp://' and 'ssl://' aliases. With use_tls, plain http is upgraded to https.
    """
    parts = urlsplit(endpoint)
    scheme = _SCHEME_ALIASES.get(parts.scheme, parts.scheme) or "http"
    if use_tls and scheme == "http":
        scheme = "https"
    if scheme not in ("http", "https"):
        raise ValueError(f"Unsupported endpoint scheme: {parts.scheme}")
    return urlunsplit((scheme, parts.netloc, parts.path.rstrip("/"), "", ""))


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class ArangoSystem:
    """Async base class for ArangoDB access. Subclasses provide the transport.

    Use as an async context manager; all workers share one instance and its
    connection pool.
    """

    protocol: str = ""

    def __init__(
        self,
        endpoint: str,
        nr_connections: int = 1,
        use_tls: bool = False,
        username: str = "",
        password: str = "",
    ):
        self.endpoint = normalize_endpoint(endpoint, use_tls)
        self.nr_connections = nr_connections
        self.use_tls = use_tls
        self.username = username
        self.password = password
        self.request_count = 0

        logger.info(
            f"Initialized {self.protocol} system for {self.endpoint} "
            f"(connections={nr_connections}, tls={use_tls}, auth={'yes' if username else 'no'})"
        )

    async def __aenter__(self):
        """Async context manager entry."""
        await self._open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self._close()
        logger.debug(f"{self.protocol} system closed after {self.request_count} requests")

    async def _open(self) -> None:
        raise NotImplementedError

    async def _close(self) -> None:
        raise NotImplementedError

    async def _send(
        self, method: str, url: str, body: Optional[Any] = None
    ) -> Tuple[int, bytes]:
        """Send one request and return (status, raw body). Transport failures raise ArangoError."""
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Request helpers
    # -------------------------------------------------------------------------

    def _url(self, path: str, database: Optional[str] = None) -> str:
        if database is not None:
            return f"{self.endpoint}/_db/{_segment(database)}{path}"
        return f"{self.endpoint}{path}"

    async def request(
        self,
        method: str,
        path: str,
        database: Optional[str] = None,
        body: Optional[Any] = None,
    ) -> Dict[str, Any]:
        """Send a request and decode the JSON response.

        Raises:
            ArangoError: On transport failure or a non-2xx response
        """
        self.request_count += 1
        status, raw = await self._send(method, self._url(path, database), body)
        try:
            payload = json.loads(raw) if raw else {}
        except ValueError as e:
            raise ArangoError(f"{method} {path} returned a non-JSON body", status=status) from e

        if status >= 300:
            message = payload.get("errorMessage") if isinstance(payload, dict) else None
            error_num = payload.get("errorNum", 0) if isinstance(payload, dict) else 0
            raise ArangoError(
                message or f"{method} {path} failed", status=status, error_num=error_num
            )
        return payload

    async def raw_get(self, path: str) -> bytes:
        """GET a path and return the body undecoded."""
        self.request_count += 1
        status, raw = await self._send("GET", self._url(path))
        if status >= 300:
            raise ArangoError(f"GET {path} failed", status=status)
        return raw

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------

    async def version(self, details: bool = False) -> Dict[str, Any]:
        path = "/_api/version?details=true" if details else "/_api/version"
        return await self.request("GET", path)

    # -------------------------------------------------------------------------
    # Databases
    # -------------------------------------------------------------------------

    async def database_exists(self, name: str) -> bool:
        try:
            await self.request("GET", "/_api/database/current", database=name)
            return True
        except ArangoError as e:
            if e.status == HTTP_NOT_FOUND:
                return False
            raise

    async def create_database(self, name: str) -> None:
        await self.request("POST", "/_api/database", body={"name": name})
        logger.info(f"Created database {name}")

    async def ensure_database(self, name: str) -> None:
        """Create the database unless it already exists."""
        if not await self.database_exists(name):
            await self.create_database(name)

    async def drop_database(self, name: str) -> None:
        await self.request("DELETE", f"/_api/database/{_segment(name)}")
        logger.info(f"Dropped database {name}")

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    async def collection_exists(self, database: str, name: str) -> bool:
        try:
            await self.request("GET", f"/_api/collection/{_segment(name)}", database=database)
            return True
        except ArangoError as e:
            if e.status == HTTP_NOT_FOUND:
                return False
            raise

    async def create_collection(
        self, database: str, name: str, replication_factor: Optional[int] = None
    ) -> None:
        body: Dict[str, Any] = {"name": name}
        if replication_factor is not None:
            body["replicationFactor"] = replication_factor
        await self.request("POST", "/_api/collection", database=database, body=body)
        logger.info(f"Created collection {database}/{name}")

    async def truncate_collection(self, database: str, name: str) -> None:
        await self.request("PUT", f"/_api/collection/{_segment(name)}/truncate", database=database)

    async def drop_collection(self, database: str, name: str) -> None:
        await self.request("DELETE", f"/_api/collection/{_segment(name)}", database=database)
        logger.info(f"Dropped collection {database}/{name}")

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    async def create_document(
        self, database: str, collection: str, document: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self.request(
            "POST", f"/_api/document/{_segment(collection)}", database=database, body=document
        )

    async def read_document(self, database: str, collection: str, key: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/_api/document/{_segment(collection)}/{_segment(key)}", database=database
        )

    async def replace_document(
        self, database: str, collection: str, key: str, document: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self.request(
            "PUT",
            f"/_api/document/{_segment(collection)}/{_segment(key)}",
            database=database,
            body=document,
        )

    # -------------------------------------------------------------------------
    # AQL
    # -------------------------------------------------------------------------

    async def query(
        self,
        database: str,
        aql: str,
        bind_vars: Optional[Dict[str, Any]] = None,
        batch_size: Optional[int] = None,
    ) -> AsyncIterator[Dict[str, Any]]:
        """Run an AQL query and yield every result document, fetching further batches as needed."""
        body: Dict[str, Any] = {"query": aql}
        if bind_vars:
            body["bindVars"] = bind_vars
        if batch_size:
            body["batchSize"] = batch_size

        batch = await self.request("POST", "/_api/cursor", database=database, body=body)
        while True:
            for document in batch.get("result", []):
                yield document
            if not batch.get("hasMore"):
                return
            batch = await self.request(
                "PUT", f"/_api/cursor/{_segment(batch['id'])}", database=database
            )
