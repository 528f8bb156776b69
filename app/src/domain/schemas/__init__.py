from .account import AccountEditRequest, AccountRegisterRequest, FriendshipResponse, PrivacyResponse  # noqa: F401
from .health import HealthResponse  # noqa: F401

__all__ = [
    "AccountEditRequest",
    "AccountRegisterRequest",
    "FriendshipResponse",
    "PrivacyResponse",
    "HealthResponse",
]
