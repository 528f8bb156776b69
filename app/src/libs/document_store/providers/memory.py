from threading import RLock
from typing import Any, Callable, Dict, Optional, TypeVar

from src.libs.document_store.exceptions import DocumentNotFoundError
from src.libs.document_store.interface import Document, DocumentStoreProvider
from src.libs.document_store.schemas import MemoryDocumentStoreConfiguration

T = TypeVar("T")


class MemoryDocumentStoreProvider(DocumentStoreProvider):
    """
    In-process document store keeping one dictionary per collection.

    Documents are stored serialized so callers never share mutable state with
    the store. Collections keep insertion order.
    """

    def __init__(self, config: MemoryDocumentStoreConfiguration) -> None:
        super().__init__(config)
        self.config: MemoryDocumentStoreConfiguration = config
        self._collections: Dict[str, Dict[str, str]] = {}
        self._lock = RLock()

    def _collection(self, collection: str) -> Dict[str, str]:
        return self._collections.setdefault(self._build_key(collection), {})

    def _mutate(
        self,
        collection: str,
        key: str,
        mutation: Callable[[Optional[Document]], tuple[Document, T]],
    ) -> T:
        """Read, change and write back one document under the store lock."""
        with self._lock:
            documents = self._collection(collection)
            raw = documents.get(key)
            current = self._deserialize(raw) if raw is not None else None

            updated, result = mutation(current)
            documents[key] = self._serialize(updated)
            return result

    async def get(self, collection: str, key: str) -> Optional[Document]:
        self._validate_key(collection, key)

        with self._lock:
            raw = self._collection(collection).get(key)

        return self._deserialize(raw) if raw is not None else None

    async def get_all(self, collection: str) -> list[Document]:
        self._validate_key(collection)

        with self._lock:
            raws = list(self._collection(collection).values())

        return [self._deserialize(raw) for raw in raws]

    async def set(self, collection: str, key: str, data: Document, merge: bool = False) -> None:
        self._validate_key(collection, key)

        def mutation(current: Optional[Document]) -> tuple[Document, None]:
            if merge and current is not None:
                return {**current, **data}, None
            return dict(data), None

        self._mutate(collection, key, mutation)

    async def update(self, collection: str, key: str, fields: Document) -> None:
        self._validate_key(collection, key)

        def mutation(current: Optional[Document]) -> tuple[Document, None]:
            if current is None:
                raise DocumentNotFoundError(f"Document {collection}/{key} not found")
            return {**current, **fields}, None

        self._mutate(collection, key, mutation)

    async def array_union(self, collection: str, key: str, field: str, *values: Any) -> list[Any]:
        return self._change_array(collection, key, field, values, remove=False)

    async def array_remove(self, collection: str, key: str, field: str, *values: Any) -> list[Any]:
        return self._change_array(collection, key, field, values, remove=True)

    def _change_array(
        self, collection: str, key: str, field: str, values: tuple[Any, ...], remove: bool
    ) -> list[Any]:
        self._validate_key(collection, key)

        def mutation(current: Optional[Document]) -> tuple[Document, list[Any]]:
            if current is None:
                raise DocumentNotFoundError(f"Document {collection}/{key} not found")
            result = self._apply_array_change(current, field, values, remove)
            return current, result

        return self._mutate(collection, key, mutation)

    async def delete(self, collection: str, key: str) -> bool:
        self._validate_key(collection, key)

        with self._lock:
            return self._collection(collection).pop(key, None) is not None

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        with self._lock:
            self._collections.clear()

    async def get_stats(self) -> dict:
        with self._lock:
            return {
                "provider_type": "memory",
                "key_prefix": self.config.key_prefix,
                "collections": {name: len(documents) for name, documents in self._collections.items()},
            }
