from pathlib import Path
from typing import Annotated, Any, Literal, Self

from dotenv import load_dotenv
from pydantic import AnyUrl, BeforeValidator, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


def parse_cors(v: Any) -> list[str]:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list):
        return v
    elif isinstance(v, str):
        return [v]
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    BASE_DIR: str = str(Path(__file__).resolve().parent.parent.parent.parent)

    APP_NAME: str = "OOTD Accounts"
    APP_DESCRIPTION: str = "Account, public map location and starred item API for OOTD"
    APP_VERSION: str = "0.1.0"
    OPENAPI_DOCS_URL: str = "/docs"
    OPENAPI_JSON_SCHEMA_URL: str = "/openapi.json"
    DOMAIN: str = "localhost"
    PORT: str = "8000"
    V1_STR: str = "v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SERVER_URL(self) -> str:
        if self.ENVIRONMENT == "local":
            return f"http://{self.DOMAIN}:{self.PORT}"
        return f"https://{self.DOMAIN}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def API_V1_STR(self) -> str:
        return f"/api/{self.V1_STR}"

    # Level of the `src` loggers, DEBUG locally and INFO elsewhere when unset
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None

    BACKEND_CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = []

    # Backing document store
    DOCUMENT_STORE_PROVIDER: Literal["memory", "redis"] | None = None
    DOCUMENT_STORE_KEY_PREFIX: str = "ootd"
    DOCUMENT_STORE_MAX_WATCH_RETRIES: int = 10
    DOCUMENT_STORE_REDIS_DB: int = 0
    ACCOUNTS_COLLECTION: str = "accounts"
    PUBLIC_LOCATIONS_COLLECTION: str = "publicLocations"

    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def DOCUMENT_STORE_BACKEND(self) -> str:
        """Provider actually used, falling back to memory when running locally."""
        if self.DOCUMENT_STORE_PROVIDER:
            return self.DOCUMENT_STORE_PROVIDER
        return "memory" if self.ENVIRONMENT == "local" else "redis"

    @model_validator(mode="after")
    def _enforce_distinct_collections(self) -> Self:
        if self.ACCOUNTS_COLLECTION == self.PUBLIC_LOCATIONS_COLLECTION:
            raise ValueError("ACCOUNTS_COLLECTION and PUBLIC_LOCATIONS_COLLECTION must be different collections.")

        if self.DOCUMENT_STORE_MAX_WATCH_RETRIES < 1:
            raise ValueError("DOCUMENT_STORE_MAX_WATCH_RETRIES must be at least 1.")

        return self
