"""
Version scenarios: the cheapest server round trip, parsed and raw.
"""

from common.errors import OperationError
from scenarios.base import Scenario
from systems.base import ArangoError


class Version(Scenario):
    name = "version"
    label = "/_api/version"

    def build_operation(self):
        async def version(index: int) -> None:
            try:
                await self.system.version()
            except ArangoError as e:
                raise OperationError(f"Error in /_api/version call: {e}", index) from e

        return version


class VersionRaw(Scenario):
    """Same endpoint without decoding the response body."""

    name = "versionRaw"
    label = "RAW /_api/version"

    def build_operation(self):
        async def version_raw(index: int) -> None:
            try:
                await self.system.raw_get("/_api/version")
            except ArangoError as e:
                raise OperationError(f"Error in raw /_api/version call: {e}", index) from e

        return version_raw
