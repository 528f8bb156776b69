import json
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.libs.document_store.exceptions import DocumentKeyError, DocumentSerializationError

Document = dict[str, Any]


class DocumentStoreProvider(ABC):
    """
    Base abstract class for all document store providers.

    A store holds named collections of JSON documents addressed by key. Field
    level array operations keep arrays duplicate free and in insertion order
    regardless of what the backing technology guarantees.
    """

    def __init__(self, config: Any) -> None:
        """Initialize the provider with its configuration."""
        self.config = config

    @abstractmethod
    async def get(self, collection: str, key: str) -> Optional[Document]:
        """
        Get a document by key.

        Args:
            collection (str): The collection name
            key (str): The document key

        Returns:
            Optional[Document]: The document, or None if it does not exist
        """
        pass

    @abstractmethod
    async def get_all(self, collection: str) -> list[Document]:
        """
        Get every document of a collection.

        Args:
            collection (str): The collection name

        Returns:
            list[Document]: All documents currently stored
        """
        pass

    @abstractmethod
    async def set(self, collection: str, key: str, data: Document, merge: bool = False) -> None:
        """
        Write a document.

        Args:
            collection (str): The collection name
            key (str): The document key
            data (Document): The document body
            merge (bool): Merge top-level fields into an existing document instead of replacing it
        """
        pass

    @abstractmethod
    async def update(self, collection: str, key: str, fields: Document) -> None:
        """
        Overwrite some top-level fields of an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    async def array_union(self, collection: str, key: str, field: str, *values: Any) -> list[Any]:
        """
        Append each value not already present to an array field.

        Returns:
            list[Any]: The resulting array

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    async def array_remove(self, collection: str, key: str, field: str, *values: Any) -> list[Any]:
        """
        Remove every occurrence of the values from an array field.

        Returns:
            list[Any]: The resulting array

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, key: str) -> bool:
        """
        Delete a document. Deleting a missing document is not an error.

        Returns:
            bool: True if a document was removed, False if none existed
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the provider is healthy and accessible.

        Returns:
            bool: True if healthy, False otherwise
        """
        pass

    async def exists(self, collection: str, key: str) -> bool:
        return await self.get(collection, key) is not None

    async def close(self) -> None:
        """
        Close connections and clean up resources.
        """
        pass

    async def get_stats(self) -> dict:
        """
        Get provider statistics.
        """
        return {
            "provider_type": "unknown",
            "key_prefix": getattr(self.config, "key_prefix", "unknown"),
        }

    def _build_key(self, collection: str) -> str:
        """
        Build the namespaced name of a collection.

        Args:
            collection (str): The collection name

        Returns:
            str: The collection name with the configured prefix
        """
        return f"{self.config.key_prefix}:{collection}"

    def _validate_key(self, *keys: str) -> None:
        """
        Validate collection names and document keys.

        Raises:
            DocumentKeyError: If a key is invalid
        """
        for key in keys:
            if not key or not isinstance(key, str) or not key.strip():
                raise DocumentKeyError("Document keys must be non-blank strings")

            if len(key) > 250:
                raise DocumentKeyError("Document keys must be 250 characters or less")

            if any(char in key for char in ("\n", "\r", "\t", "/")):
                raise DocumentKeyError("Document keys cannot contain '/' or newline characters")

    @staticmethod
    def _serialize(document: Document) -> str:
        try:
            return json.dumps(document)
        except (TypeError, ValueError) as e:
            raise DocumentSerializationError(f"Failed to serialize document: {str(e)}")

    @staticmethod
    def _deserialize(serialized: str) -> Document:
        try:
            document = json.loads(serialized)
        except (TypeError, ValueError) as e:
            raise DocumentSerializationError(f"Failed to deserialize document: {str(e)}")

        if not isinstance(document, dict):
            raise DocumentSerializationError("Stored value is not a document")
        return document

    @staticmethod
    def _apply_array_change(document: Document, field: str, values: tuple[Any, ...], remove: bool) -> list[Any]:
        """
        Apply an array union or removal to a document in place.

        Returns:
            list[Any]: The resulting array
        """
        current = document.get(field)
        if current is None:
            current = []
        elif not isinstance(current, list):
            raise DocumentSerializationError(f"Field '{field}' is not an array")

        if remove:
            result = [value for value in current if value not in values]
        else:
            result = list(current)
            for value in values:
                if value not in result:
                    result.append(value)

        document[field] = result
        return list(result)
