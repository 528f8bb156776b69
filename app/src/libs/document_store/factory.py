from typing import Any

from src.core.config import settings
from src.core.logging import get_logger
from src.libs.document_store.exceptions import DocumentStoreConfigurationError
from src.libs.document_store.interface import DocumentStoreProvider
from src.libs.document_store.providers.memory import MemoryDocumentStoreProvider
from src.libs.document_store.providers.redis import RedisDocumentStoreProvider
from src.libs.document_store.schemas import MemoryDocumentStoreConfiguration, RedisDocumentStoreConfiguration

logger = get_logger(__name__)


class DocumentStoreFactory:
    """
    Factory for creating document store providers based on environment and configuration.
    """

    _providers: dict[str, type[DocumentStoreProvider]] = {
        "memory": MemoryDocumentStoreProvider,
        "redis": RedisDocumentStoreProvider,
    }

    @classmethod
    def register_provider(cls, name: str, provider_class: type[DocumentStoreProvider]) -> None:
        """
        Register a custom document store provider.

        Args:
            name: Provider name
            provider_class: Provider class
        """
        cls._providers[name] = provider_class

    @classmethod
    def create_provider(cls, provider_type: str, config: Any) -> DocumentStoreProvider:
        """
        Create a provider instance.

        Args:
            provider_type: Type of provider to create
            config: Provider configuration

        Returns:
            An instance of the requested provider

        Raises:
            DocumentStoreConfigurationError: If the provider type is not supported
        """
        if provider_type not in cls._providers:
            raise DocumentStoreConfigurationError(f"Unsupported document store provider type: {provider_type}")

        provider_class = cls._providers[provider_type]
        return provider_class(config)

    @classmethod
    def get_configured_provider(cls) -> DocumentStoreProvider:
        """
        Get the document store provider selected by the settings.

        Returns:
            An instance of the configured provider
        """
        return cls.create_custom_provider(settings.DOCUMENT_STORE_BACKEND)

    @classmethod
    def create_custom_provider(
        cls, provider_type: str, config_overrides: dict[str, Any] | None = None
    ) -> DocumentStoreProvider:
        """
        Create a provider from the settings with some values overridden.

        Args:
            provider_type: Type of provider to create ("memory" or "redis")
            config_overrides: Configuration overrides

        Returns:
            An instance of the document store provider
        """
        config_overrides = config_overrides or {}

        logger.info(f"Creating document store provider: {provider_type} for environment: {settings.ENVIRONMENT}")

        if provider_type == "memory":
            default_config: dict[str, Any] = {
                "key_prefix": settings.DOCUMENT_STORE_KEY_PREFIX,
            }
            default_config.update(config_overrides)
            return cls.create_provider("memory", MemoryDocumentStoreConfiguration(**default_config))

        elif provider_type == "redis":
            default_config = {
                "key_prefix": settings.DOCUMENT_STORE_KEY_PREFIX,
                "host": settings.REDIS_HOST,
                "port": settings.REDIS_PORT,
                "password": settings.REDIS_PASSWORD,
                "db": settings.DOCUMENT_STORE_REDIS_DB,
                "max_watch_retries": settings.DOCUMENT_STORE_MAX_WATCH_RETRIES,
            }
            default_config.update(config_overrides)
            return cls.create_provider("redis", RedisDocumentStoreConfiguration(**default_config))

        else:
            raise DocumentStoreConfigurationError(f"Unsupported document store provider: {provider_type}")
