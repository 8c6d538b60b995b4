"""
Tests for the ArangoDB REST layer, using a scripted transport.
"""

import json
import unittest
import sys
import os

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.errors import ConfigurationError
from common.system_factory import create_system
from systems.base import ArangoError, ArangoSystem, normalize_endpoint
from systems.http1 import HTTPSystem
from systems.http2 import HTTP2System


class ScriptedSystem(ArangoSystem):
    """Returns queued (status, payload) responses and records every request."""

    protocol = "SCRIPTED"

    def __init__(self, responses, endpoint="http://localhost:8529"):
        super().__init__(endpoint)
        self.responses = list(responses)
        self.sent = []
        self.opened = False
        self.closed = False

    async def _open(self):
        self.opened = True

    async def _close(self):
        self.closed = True

    async def _send(self, method, url, body=None):
        self.sent.append((method, url, body))
        status, payload = self.responses.pop(0)
        raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        return status, raw


class TestNormalizeEndpoint(unittest.TestCase):

    def test_http_endpoints(self):
        self.assertEqual(normalize_endpoint("http://localhost:8529"), "http://localhost:8529")
        self.assertEqual(normalize_endpoint("http://localhost:8529/"), "http://localhost:8529")
        self.assertEqual(normalize_endpoint("https://db:8530"), "https://db:8530")

    def test_driver_scheme_aliases(self):
        self.assertEqual(normalize_endpoint("tcp://localhost:8529"), "http://localhost:8529")
        self.assertEqual(normalize_endpoint("ssl://localhost:8529"), "https://localhost:8529")

    def test_tls_upgrades_http(self):
        self.assertEqual(normalize_endpoint("http://db:8529", use_tls=True), "https://db:8529")

    def test_unsupported_scheme(self):
        with self.assertRaises(ValueError):
            normalize_endpoint("vst://localhost:8529")


class TestCreateSystem(unittest.TestCase):

    def test_protocols(self):
        self.assertIsInstance(create_system("HTTP", "http://localhost:8529"), HTTPSystem)
        self.assertIsInstance(create_system("http2", "http://localhost:8529"), HTTP2System)

    def test_options_passed_through(self):
        system = create_system("HTTP2", "http://db:8529", nr_connections=4, use_tls=True, username="root")
        self.assertEqual(system.endpoint, "https://db:8529")
        self.assertEqual(system.nr_connections, 4)
        self.assertEqual(system.username, "root")

    def test_vst_rejected(self):
        with self.assertRaises(ConfigurationError):
            create_system("VST", "http://localhost:8529")

    def test_bad_endpoint_rejected(self):
        with self.assertRaises(ConfigurationError):
            create_system("HTTP", "vst://localhost:8529")


class TestArangoSystem(unittest.IsolatedAsyncioTestCase):
    """REST calls and error decoding of the shared base class."""

    async def test_context_manager(self):
        system = ScriptedSystem([])
        async with system as opened:
            self.assertIs(opened, system)
            self.assertTrue(system.opened)
        self.assertTrue(system.closed)

    async def test_document_url(self):
        system = ScriptedSystem([(200, {"_key": "K1", "no_pages": 1})])
        document = await system.read_document("benchDB", "test", "K1")

        self.assertEqual(document["no_pages"], 1)
        self.assertEqual(
            system.sent, [("GET", "http://localhost:8529/_db/benchDB/_api/document/test/K1", None)]
        )
        self.assertEqual(system.request_count, 1)

    async def test_error_response_decoded(self):
        system = ScriptedSystem([
            (409, {"error": True, "code": 409, "errorNum": 1210, "errorMessage": "unique constraint violated"})
        ])

        with self.assertRaises(ArangoError) as ctx:
            await system.create_document("benchDB", "test", {"_key": "K1"})

        self.assertEqual(ctx.exception.status, 409)
        self.assertEqual(ctx.exception.error_num, 1210)
        self.assertIn("unique constraint violated", str(ctx.exception))

    async def test_error_without_body(self):
        system = ScriptedSystem([(503, b"")])
        with self.assertRaises(ArangoError) as ctx:
            await system.version()
        self.assertEqual(ctx.exception.status, 503)

    async def test_non_json_error_body(self):
        system = ScriptedSystem([(502, b"<html><body>Bad Gateway</body></html>")])
        with self.assertRaises(ArangoError) as ctx:
            await system.create_collection("benchDB", "test")
        self.assertEqual(ctx.exception.status, 502)
        self.assertIn("non-JSON", str(ctx.exception))

    async def test_database_exists(self):
        system = ScriptedSystem([
            (200, {"result": {"name": "benchDB"}}),
            (404, {"error": True, "errorNum": 1228, "errorMessage": "database not found"}),
        ])
        self.assertTrue(await system.database_exists("benchDB"))
        self.assertFalse(await system.database_exists("benchDB"))

    async def test_database_exists_propagates_other_errors(self):
        system = ScriptedSystem([(401, {"error": True, "errorNum": 11, "errorMessage": "not authorized"})])
        with self.assertRaises(ArangoError):
            await system.database_exists("benchDB")

    async def test_ensure_database_creates_when_missing(self):
        system = ScriptedSystem([
            (404, {"error": True, "errorNum": 1228}),
            (201, {"result": True}),
        ])
        await system.ensure_database("booksDB")
        method, url, body = system.sent[1]
        self.assertEqual((method, url, body), ("POST", "http://localhost:8529/_api/database", {"name": "booksDB"}))

    async def test_create_collection_with_replication_factor(self):
        system = ScriptedSystem([(200, {"name": "test"})])
        await system.create_collection("benchDB", "test", replication_factor=3)
        self.assertEqual(system.sent[0][2], {"name": "test", "replicationFactor": 3})

    async def test_query_fetches_all_batches(self):
        system = ScriptedSystem([
            (201, {"result": [1, 2], "hasMore": True, "id": "77"}),
            (200, {"result": [3], "hasMore": False}),
        ])

        results = [document async for document in system.query("booksDB", "FOR b IN books RETURN b")]

        self.assertEqual(results, [1, 2, 3])
        self.assertEqual(system.sent[0][:2], ("POST", "http://localhost:8529/_db/booksDB/_api/cursor"))
        self.assertEqual(system.sent[0][2], {"query": "FOR b IN books RETURN b"})
        self.assertEqual(system.sent[1][:2], ("PUT", "http://localhost:8529/_db/booksDB/_api/cursor/77"))

    async def test_raw_get_returns_body(self):
        system = ScriptedSystem([(200, b'{"server":"arango","version":"3.11.0"}')])
        raw = await system.raw_get("/_api/version")
        self.assertEqual(raw, b'{"server":"arango","version":"3.11.0"}')
        self.assertEqual(system.sent[0][1], "http://localhost:8529/_api/version")


if __name__ == '__main__':
    unittest.main()
