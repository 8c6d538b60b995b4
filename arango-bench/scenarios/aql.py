"""
AQL scenario: a fixed three-way self-join over a small seeded collection.
"""

import logging

from common.errors import OperationError
from persistence.record import Book, document_key
from scenarios.base import Scenario
from systems.base import ArangoError
from configuration import (
    AQL_DATABASE,
    AQL_COLLECTION,
    AQL_FIXTURE_SIZE,
    THREE_DIAMOND_AQL,
)

logger = logging.getLogger(__name__)


class ReadThreeDiamondAQL(Scenario):
    """Run the three diamond query and drain its cursor on every request."""

    name = "readThreeDiamondAQL"
    label = "read three diamond AQL ops"

    def __init__(self, system, run_config, database: str = AQL_DATABASE, collection: str = AQL_COLLECTION):
        super().__init__(system, run_config, database=database, collection=collection)

    async def setup(self) -> None:
        """Create the database and a fresh collection holding the fixture books."""
        logger.info(f"Setting up a database, collection and {AQL_FIXTURE_SIZE} documents...")
        await self.system.ensure_database(self.database)

        if await self.system.collection_exists(self.database, self.collection):
            await self.system.truncate_collection(self.database, self.collection)
        else:
            await self.system.create_collection(self.database, self.collection)

        for index in range(AQL_FIXTURE_SIZE):
            book = Book(no_pages=index, key=document_key(index))
            await self.system.create_document(self.database, self.collection, book.to_document())

        logger.info("Done, let the race begin!")

    def build_operation(self):
        async def query(index: int) -> None:
            try:
                async for _ in self.system.query(self.database, THREE_DIAMOND_AQL):
                    pass
            except ArangoError as e:
                raise OperationError(f"Failed to read doc from cursor: {e}", index) from e

        return query

    async def teardown(self) -> None:
        await self.system.drop_collection(self.database, self.collection)
        await self.system.drop_database(self.database)
