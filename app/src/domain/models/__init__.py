from .account import Account, PublicLocation  # noqa: F401
from .location import EMPTY_LOCATION, EPFL_LOCATION, Location, is_valid_location  # noqa: F401
from .user import User  # noqa: F401

__all__ = [
    "Account",
    "PublicLocation",
    "EMPTY_LOCATION",
    "EPFL_LOCATION",
    "Location",
    "is_valid_location",
    "User",
]
