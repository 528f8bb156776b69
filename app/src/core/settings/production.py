from typing import Literal

from .base import Settings as BaseSettings


class Settings(BaseSettings):
    """Settings for the production deployment, backed by Redis."""

    ENVIRONMENT: Literal["local", "staging", "production"] = "production"
    DOCUMENT_STORE_PROVIDER: Literal["memory", "redis"] | None = "redis"
    DOCUMENT_STORE_REDIS_DB: int = 0
