from .base_repository import BaseRepository  # noqa: F401
from .public_location_repository import PublicLocationIndex  # noqa: F401
from .account_store import AccountStore  # noqa: F401
from .starred_item_cache import StarredItemCache  # noqa: F401
from .account_repository import AccountRepository  # noqa: F401

__all__ = [
    "BaseRepository",
    "PublicLocationIndex",
    "AccountStore",
    "StarredItemCache",
    "AccountRepository",
]
