from typing import Literal

from .base import Settings as BaseSettings


class Settings(BaseSettings):
    """Settings to use on a developer machine and in the test suite."""

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
