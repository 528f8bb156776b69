from .account import (  # noqa: F401
    AccountNotFoundError,
    DuplicateAccountError,
    InvalidLocationError,
    StarredItemSyncError,
    TakenUsernameError,
)
from .base import NotFoundError, ServiceError, UnauthorizedError  # noqa: F401
from .database import DatabaseError  # noqa: F401

__all__ = [
    "AccountNotFoundError",
    "DuplicateAccountError",
    "InvalidLocationError",
    "StarredItemSyncError",
    "TakenUsernameError",
    "NotFoundError",
    "ServiceError",
    "UnauthorizedError",
    "DatabaseError",
]
