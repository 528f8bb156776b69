from typing import Literal

from .base import Settings as BaseSettings


class Settings(BaseSettings):
    """Settings for the staging deployment. Uses its own Redis database so it can share a server with production."""

    ENVIRONMENT: Literal["local", "staging", "production"] = "staging"
    DOCUMENT_STORE_PROVIDER: Literal["memory", "redis"] | None = "redis"
    DOCUMENT_STORE_REDIS_DB: int = 1
