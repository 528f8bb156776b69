from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from src.core.exceptions import errors
from src.core.logging import get_logger
from src.libs.document_store import (
    Document,
    DocumentKeyError,
    DocumentNotFoundError,
    DocumentStoreError,
    DocumentStoreProvider,
)

logger = get_logger(__name__)


class BaseRepository:
    """
    Base repository providing document operations on one collection.\n
    Store failures are logged and re-raised as `errors.DatabaseError`; field
    updates on a missing document raise `not_found_error`; malformed keys are
    rejected with `errors.ServiceError`.
    """

    not_found_error: type[errors.NotFoundError] = errors.NotFoundError

    def __init__(self, store: DocumentStoreProvider, collection: str):
        self.store = store
        self.collection = collection

    @contextmanager
    def _store_errors(self, action: str, key: str | None) -> Iterator[None]:
        try:
            yield
        except DocumentNotFoundError as e:
            raise self.not_found_error(metadata={"id": key}) from e
        except DocumentKeyError as e:
            raise errors.ServiceError(detail=e.message, metadata={"collection": self.collection, "key": key}) from e
        except DocumentStoreError as e:
            logger.exception(
                f"{type(self).__module__}.{action}:: document store failure on {self.collection}/{key or '*'}: {e}"
            )
            raise errors.DatabaseError(
                detail=f"An error occurred while trying to {action.replace('_', ' ')}.",
                metadata={"collection": self.collection, "key": key, "action": action},
            ) from e

    async def find_document(self, key: str) -> Document | None:
        """
        Get a single document by key.

        Args:
            key (str): The document key

        Returns:
            Document | None: The stored document or None
        """
        with self._store_errors("find_document", key):
            return await self.store.get(self.collection, key)

    async def find_all_documents(self) -> list[Document]:
        """Get every document of the collection."""
        with self._store_errors("find_all_documents", None):
            return await self.store.get_all(self.collection)

    async def write_document(self, key: str, document: Document, merge: bool = False) -> None:
        """
        Create or replace a document.

        Args:
            key (str): The document key
            document (Document): The document body
            merge (bool): Merge into the existing document instead of replacing it
        """
        with self._store_errors("write_document", key):
            await self.store.set(self.collection, key, document, merge=merge)

    async def update_fields(self, key: str, **fields: Any) -> None:
        """Overwrite some fields of an existing document."""
        with self._store_errors("update_fields", key):
            await self.store.update(self.collection, key, fields)

    async def add_to_array(self, key: str, field: str, *values: Any) -> list[Any]:
        """Union values into an array field, returning the resulting array."""
        with self._store_errors("add_to_array", key):
            return await self.store.array_union(self.collection, key, field, *values)

    async def remove_from_array(self, key: str, field: str, *values: Any) -> list[Any]:
        """Remove values from an array field, returning the resulting array."""
        with self._store_errors("remove_from_array", key):
            return await self.store.array_remove(self.collection, key, field, *values)

    async def delete_document(self, key: str) -> bool:
        """
        Delete a document by key. A missing document is not an error.

        Returns:
            bool: True if a document was removed
        """
        with self._store_errors("delete_document", key):
            return await self.store.delete(self.collection, key)
