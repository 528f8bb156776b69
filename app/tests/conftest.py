from typing import Any, Optional

import pytest
from src.domain.models import EPFL_LOCATION, Account
from src.domain.repositories import AccountRepository, AccountStore, PublicLocationIndex, StarredItemCache
from src.libs.document_store import (
    Document,
    DocumentStoreError,
    MemoryDocumentStoreConfiguration,
    MemoryDocumentStoreProvider,
)


class FailingMemoryDocumentStoreProvider(MemoryDocumentStoreProvider):
    """Memory store whose operations can be made to fail for one collection."""

    def __init__(self) -> None:
        super().__init__(MemoryDocumentStoreConfiguration(key_prefix="test"))
        self.failures: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []

    def fail(self, operation: str, collection: str) -> None:
        self.failures.add((operation, collection))

    def recover(self) -> None:
        self.failures.clear()

    def _record(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        if (operation, collection) in self.failures:
            raise DocumentStoreError(f"Injected {operation} failure on {collection}")

    async def get(self, collection: str, key: str) -> Optional[Document]:
        self._record("get", collection)
        return await super().get(collection, key)

    async def get_all(self, collection: str) -> list[Document]:
        self._record("get_all", collection)
        return await super().get_all(collection)

    async def set(self, collection: str, key: str, data: Document, merge: bool = False) -> None:
        self._record("set", collection)
        await super().set(collection, key, data, merge=merge)

    async def update(self, collection: str, key: str, fields: Document) -> None:
        self._record("update", collection)
        await super().update(collection, key, fields)

    async def array_union(self, collection: str, key: str, field: str, *values: Any) -> list[Any]:
        self._record("array_union", collection)
        return await super().array_union(collection, key, field, *values)

    async def array_remove(self, collection: str, key: str, field: str, *values: Any) -> list[Any]:
        self._record("array_remove", collection)
        return await super().array_remove(collection, key, field, *values)

    async def delete(self, collection: str, key: str) -> bool:
        self._record("delete", collection)
        return await super().delete(collection, key)


def make_account(owner_id: str, **fields: Any) -> Account:
    """A registered public account located at EPFL unless overridden."""
    values: dict[str, Any] = {
        "uid": owner_id,
        "owner_id": owner_id,
        "username": f"user-{owner_id}",
        "location": EPFL_LOCATION,
        "is_private": False,
    }
    values.update(fields)
    return Account(**values)


@pytest.fixture
def store() -> FailingMemoryDocumentStoreProvider:
    return FailingMemoryDocumentStoreProvider()


@pytest.fixture
def public_locations(store: FailingMemoryDocumentStoreProvider) -> PublicLocationIndex:
    return PublicLocationIndex(store)


@pytest.fixture
def account_store(store: FailingMemoryDocumentStoreProvider, public_locations: PublicLocationIndex) -> AccountStore:
    return AccountStore(store, public_locations)


@pytest.fixture
def starred_items(account_store: AccountStore) -> StarredItemCache:
    return StarredItemCache(account_store)


@pytest.fixture
def repository(store: FailingMemoryDocumentStoreProvider) -> AccountRepository:
    return AccountRepository(store, current_user_id="u1")


@pytest.fixture
def account_factory():
    return make_account
