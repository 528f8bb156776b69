from dataclasses import dataclass
from typing import Optional


@dataclass
class DocumentStoreConfiguration:
    """Base document store configuration."""

    key_prefix: str = "ootd"


@dataclass
class MemoryDocumentStoreConfiguration(DocumentStoreConfiguration):
    """In-memory document store configuration."""


@dataclass
class RedisDocumentStoreConfiguration(DocumentStoreConfiguration):
    """Redis document store configuration. Each collection is one Redis hash."""

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    db: int = 0
    socket_timeout: int = 5
    socket_connect_timeout: int = 5
    retry_on_timeout: bool = True
    health_check_interval: int = 30
    max_connections: int = 10
    max_watch_retries: int = 10
