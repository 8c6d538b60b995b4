"""
Factory module for creating ArangoDB system instances.
"""

import logging

# Keep transport libraries quiet; benchmark output must stay readable
logging.getLogger('aiohttp').setLevel(logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('hpack').setLevel(logging.WARNING)
logging.getLogger('h2').setLevel(logging.WARNING)

from common.errors import ConfigurationError
from systems.http1 import HTTPSystem
from systems.http2 import HTTP2System
from configuration import SUPPORTED_PROTOCOLS

logger = logging.getLogger(__name__)


def create_system(
    protocol: str,
    endpoint: str,
    nr_connections: int = 1,
    use_tls: bool = False,
    username: str = "",
    password: str = "",
):
    """Create and return the ArangoDB system for a wire protocol.

    Args:
        protocol: 'HTTP' or 'HTTP2'
        endpoint: Server endpoint URL
        nr_connections: Maximum number of connections to the server
        use_tls: Use TLS (certificates are not verified)
        username: Basic auth user name, empty for no authentication
        password: Basic auth password

    Returns:
        System instance (HTTPSystem or HTTP2System)

    Raises:
        ConfigurationError: If the protocol or endpoint is not supported
    """
    protocol = protocol.upper()
    if protocol == "HTTP":
        system_class = HTTPSystem
    elif protocol == "HTTP2":
        system_class = HTTP2System
    else:
        raise ConfigurationError(
            f"protocol needs to be {' or '.join(SUPPORTED_PROTOCOLS)}, got {protocol!r}"
        )

    try:
        return system_class(
            endpoint,
            nr_connections=nr_connections,
            use_tls=use_tls,
            username=username,
            password=password,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
