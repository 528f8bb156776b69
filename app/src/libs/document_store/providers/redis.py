import logging
from typing import Any, Callable, Optional, TypeVar

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, WatchError

from src.libs.document_store.exceptions import (
    DocumentConflictError,
    DocumentNotFoundError,
    DocumentStoreConnectionError,
    DocumentStoreError,
)
from src.libs.document_store.interface import Document, DocumentStoreProvider
from src.libs.document_store.schemas import RedisDocumentStoreConfiguration

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RedisDocumentStoreProvider(DocumentStoreProvider):
    """
    Redis backed document store.

    Each collection is a Redis hash named `<prefix>:<collection>` whose fields
    are document keys and whose values are JSON documents. Read-modify-write
    operations run as optimistic WATCH/MULTI transactions.
    """

    def __init__(self, config: RedisDocumentStoreConfiguration) -> None:
        super().__init__(config)
        self.config: RedisDocumentStoreConfiguration = config
        self._client: Optional[redis.Redis] = None
        self._connection_pool: Optional[redis.ConnectionPool] = None

    async def _get_client(self) -> redis.Redis:
        """Get or create the Redis client."""
        if self._client is None:
            try:
                self._connection_pool = redis.ConnectionPool(
                    host=self.config.host,
                    port=self.config.port,
                    password=self.config.password,
                    db=self.config.db,
                    socket_timeout=self.config.socket_timeout,
                    socket_connect_timeout=self.config.socket_connect_timeout,
                    retry_on_timeout=self.config.retry_on_timeout,
                    health_check_interval=self.config.health_check_interval,
                    decode_responses=True,
                    max_connections=self.config.max_connections,
                )

                client = redis.Redis(connection_pool=self._connection_pool)
                await client.ping()
                self._client = client
                logger.info("Redis document store connected successfully")

            except RedisError as e:
                logger.error(f"Failed to connect to Redis: {str(e)}")
                raise DocumentStoreConnectionError(f"Failed to connect to Redis: {str(e)}") from e

        return self._client

    async def _transact(
        self,
        collection: str,
        key: str,
        mutation: Callable[[Optional[Document]], tuple[Document, T]],
    ) -> T:
        """Run a read-modify-write of one document, retrying when another writer wins the race."""
        client = await self._get_client()
        name = self._build_key(collection)

        try:
            async with client.pipeline(transaction=True) as pipe:
                for _ in range(self.config.max_watch_retries):
                    try:
                        await pipe.watch(name)
                        raw = await pipe.hget(name, key)
                        current = self._deserialize(raw) if raw is not None else None

                        updated, result = mutation(current)

                        pipe.multi()
                        pipe.hset(name, key, self._serialize(updated))
                        await pipe.execute()
                        return result
                    except WatchError:
                        logger.debug(f"Concurrent write on {name}/{key}, retrying")
                        continue
        except RedisConnectionError as e:
            raise DocumentStoreConnectionError(f"Lost connection to Redis: {str(e)}") from e
        except RedisError as e:
            raise DocumentStoreError(f"Redis transaction failed for {collection}/{key}: {str(e)}") from e

        raise DocumentConflictError(
            f"Gave up writing {collection}/{key} after {self.config.max_watch_retries} concurrent modifications"
        )

    async def get(self, collection: str, key: str) -> Optional[Document]:
        self._validate_key(collection, key)
        client = await self._get_client()

        try:
            raw = await client.hget(self._build_key(collection), key)
        except RedisError as e:
            raise DocumentStoreError(f"Failed to read {collection}/{key}: {str(e)}") from e

        return self._deserialize(raw) if raw is not None else None

    async def get_all(self, collection: str) -> list[Document]:
        self._validate_key(collection)
        client = await self._get_client()

        try:
            raws = await client.hvals(self._build_key(collection))
        except RedisError as e:
            raise DocumentStoreError(f"Failed to read collection {collection}: {str(e)}") from e

        return [self._deserialize(raw) for raw in raws]

    async def set(self, collection: str, key: str, data: Document, merge: bool = False) -> None:
        self._validate_key(collection, key)

        if merge:

            def mutation(current: Optional[Document]) -> tuple[Document, None]:
                return {**(current or {}), **data}, None

            await self._transact(collection, key, mutation)
            return

        client = await self._get_client()
        try:
            await client.hset(self._build_key(collection), key, self._serialize(data))
        except RedisError as e:
            raise DocumentStoreError(f"Failed to write {collection}/{key}: {str(e)}") from e

    async def update(self, collection: str, key: str, fields: Document) -> None:
        self._validate_key(collection, key)

        def mutation(current: Optional[Document]) -> tuple[Document, None]:
            if current is None:
                raise DocumentNotFoundError(f"Document {collection}/{key} not found")
            return {**current, **fields}, None

        await self._transact(collection, key, mutation)

    async def array_union(self, collection: str, key: str, field: str, *values: Any) -> list[Any]:
        return await self._change_array(collection, key, field, values, remove=False)

    async def array_remove(self, collection: str, key: str, field: str, *values: Any) -> list[Any]:
        return await self._change_array(collection, key, field, values, remove=True)

    async def _change_array(
        self, collection: str, key: str, field: str, values: tuple[Any, ...], remove: bool
    ) -> list[Any]:
        self._validate_key(collection, key)

        def mutation(current: Optional[Document]) -> tuple[Document, list[Any]]:
            if current is None:
                raise DocumentNotFoundError(f"Document {collection}/{key} not found")
            result = self._apply_array_change(current, field, values, remove)
            return current, result

        return await self._transact(collection, key, mutation)

    async def delete(self, collection: str, key: str) -> bool:
        self._validate_key(collection, key)
        client = await self._get_client()

        try:
            removed = await client.hdel(self._build_key(collection), key)
        except RedisError as e:
            raise DocumentStoreError(f"Failed to delete {collection}/{key}: {str(e)}") from e

        return bool(removed)

    async def health_check(self) -> bool:
        try:
            client = await self._get_client()
            await client.ping()
            return True
        except (DocumentStoreError, RedisError) as e:
            logger.error(f"Redis health check failed: {str(e)}")
            return False

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

        if self._connection_pool:
            await self._connection_pool.disconnect()
            self._connection_pool = None

    async def get_stats(self) -> dict:
        try:
            client = await self._get_client()
            info = await client.info()

            return {
                "provider_type": "redis",
                "key_prefix": self.config.key_prefix,
                "connected_clients": info.get("connected_clients", 0),
                "used_memory_human": info.get("used_memory_human", "0B"),
                "total_commands_processed": info.get("total_commands_processed", 0),
            }

        except (DocumentStoreError, RedisError) as e:
            logger.error(f"Failed to get Redis stats: {str(e)}")
            return {"provider_type": "redis", "error": str(e)}
