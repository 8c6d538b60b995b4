"""
Configuration constants for the ArangoDB load generator.

This module contains all configuration parameters including:
- Server endpoint and credentials
- Connection and protocol settings
- Load parameters (request count, parallelism, delay)
- Fixture names for the document and AQL scenarios
- Output formats and time conversion factors
"""

import os
from typing import Tuple

# =============================================================================
# SERVER CONFIGURATION
# =============================================================================

ARANGO_ENDPOINT: str = os.getenv("ARANGO_ENDPOINT", "http://127.0.0.1:8529")
ARANGO_USER: str = os.getenv("ARANGO_USER", "")
ARANGO_PASSWORD: str = os.getenv("ARANGO_PASSWORD", "")

# =============================================================================
# CONNECTION CONFIGURATION
# =============================================================================

DEFAULT_NR_CONNECTIONS: int = 1
DEFAULT_PROTOCOL: str = "HTTP"
SUPPORTED_PROTOCOLS: Tuple[str, ...] = ("HTTP", "HTTP2")

# Per-request limits of the HTTP clients
REQUEST_TIMEOUT_SECONDS: int = 120
CONNECT_TIMEOUT_SECONDS: int = 30

# =============================================================================
# LOAD PARAMETERS
# =============================================================================

DEFAULT_TESTCASE: str = "postDocs"
DEFAULT_NR_REQUESTS: int = 1000
DEFAULT_PARALLELISM: int = 1
DEFAULT_DELAY: str = "0"
DEFAULT_REPLICATION_FACTOR: int = 1
DEFAULT_DISTRIBUTION: str = "static"
SUPPORTED_DISTRIBUTIONS: Tuple[str, ...] = ("static", "queue")

PROGRESS_INTERVAL: int = 1000  # Log worker progress every N requests (DEBUG)

# =============================================================================
# FIXTURES
# =============================================================================

BENCH_DATABASE: str = "benchDB"
BENCH_COLLECTION: str = "test"

AQL_DATABASE: str = "booksDB"
AQL_COLLECTION: str = "books"
AQL_FIXTURE_SIZE: int = 100

BOOK_TITLE: str = "Some small string"
DOCUMENT_KEY_PREFIX: str = "K"

THREE_DIAMOND_AQL: str = (
    "FOR b1 IN books FOR b2 IN books FILTER b1._key == b2._key "
    "FOR b3 IN books FILTER b3._key == b1._key LIMIT 10 "
    "RETURN {_key: b1._key, title: b2.title, no_pages: b3.no_pages}"
)

# =============================================================================
# OUTPUT
# =============================================================================

OUTPUT_CONSOLE: str = "console"
OUTPUT_CSV: str = "csv"
SUPPORTED_OUTPUT_FORMATS: Tuple[str, ...] = (OUTPUT_CONSOLE, OUTPUT_CSV)
DEFAULT_OUTPUT_FORMAT: str = OUTPUT_CONSOLE

# Statistics
OUTLIER_GROUP_SIZE: int = 10  # Number of smallest/largest samples shown
MIN_SAMPLES_FOR_OUTLIERS: int = 20

# =============================================================================
# TIME CONSTANTS
# =============================================================================

NANOS_PER_MICRO: int = 1_000
NANOS_PER_MILLI: int = 1_000_000
NANOS_PER_SECOND: int = 1_000_000_000
SECONDS_PER_MINUTE: int = 60
SECONDS_PER_HOUR: int = 3600
