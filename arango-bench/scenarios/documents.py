"""
Document scenarios: create, seed, read and replace single documents.
"""

import logging

from common.errors import OperationError
from persistence.record import Book, document_key
from scenarios.base import Scenario
from systems.base import ArangoError

logger = logging.getLogger(__name__)


class PostDocs(Scenario):
    """Create documents with server generated keys."""

    name = "postDocs"
    label = "create document ops"

    def build_operation(self):
        async def create(index: int) -> None:
            book = Book(no_pages=index)
            try:
                await self.system.create_document(self.database, self.collection, book.to_document())
            except ArangoError as e:
                raise OperationError(f"Failed to create document: {e}", index) from e

        return create


class SeedDocs(Scenario):
    """Create documents with deterministic keys K<index> for the read scenarios."""

    name = "seedDocs"
    label = "seed document ops"

    def build_operation(self):
        async def seed(index: int) -> None:
            book = Book(no_pages=index, key=document_key(index))
            try:
                await self.system.create_document(self.database, self.collection, book.to_document())
            except ArangoError as e:
                raise OperationError(f"Failed to create document: {e}", index) from e

        return seed


class ReadDocs(Scenario):
    """Read back the seeded documents, one key per request."""

    name = "readDocs"
    label = "read document ops"

    def build_operation(self):
        async def read(index: int) -> None:
            try:
                await self.system.read_document(self.database, self.collection, document_key(index))
            except ArangoError as e:
                raise OperationError(f"Failed to read document: {e}", index) from e

        return read


class ReadSameDocs(Scenario):
    """Every worker reads the same document over and over."""

    name = "readSameDocs"
    label = "read same document ops"

    def build_operation(self):
        async def read_same(index: int) -> None:
            key = document_key(self.partition_base(index))
            try:
                await self.system.read_document(self.database, self.collection, key)
            except ArangoError as e:
                raise OperationError(f"Failed to read document: {e}", index) from e

        return read_same


class ReplaceDocs(Scenario):
    """Replace the first seeded document of each worker's partition."""

    name = "replaceDocs"
    label = "replace same document ops"

    def build_operation(self):
        async def replace(index: int) -> None:
            key = document_key(self.partition_base(index))
            book = Book(no_pages=index, key=document_key(index))
            try:
                await self.system.replace_document(
                    self.database, self.collection, key, book.to_document()
                )
            except ArangoError as e:
                raise OperationError(f"Failed to replace document: {e}", index) from e

        return replace
