from .memory import MemoryDocumentStoreProvider
from .redis import RedisDocumentStoreProvider

__all__ = ["MemoryDocumentStoreProvider", "RedisDocumentStoreProvider"]
