from .exceptions import (
    DocumentConflictError,
    DocumentKeyError,
    DocumentNotFoundError,
    DocumentSerializationError,
    DocumentStoreConfigurationError,
    DocumentStoreConnectionError,
    DocumentStoreError,
)
from .factory import DocumentStoreFactory
from .interface import Document, DocumentStoreProvider
from .providers import MemoryDocumentStoreProvider, RedisDocumentStoreProvider
from .schemas import DocumentStoreConfiguration, MemoryDocumentStoreConfiguration, RedisDocumentStoreConfiguration

__all__ = [
    # Core classes
    "Document",
    "DocumentStoreFactory",
    "DocumentStoreProvider",
    "MemoryDocumentStoreProvider",
    "RedisDocumentStoreProvider",
    # Schemas
    "DocumentStoreConfiguration",
    "MemoryDocumentStoreConfiguration",
    "RedisDocumentStoreConfiguration",
    # Exceptions
    "DocumentStoreError",
    "DocumentStoreConnectionError",
    "DocumentSerializationError",
    "DocumentKeyError",
    "DocumentNotFoundError",
    "DocumentConflictError",
    "DocumentStoreConfigurationError",
]
