from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from src.domain.models import EMPTY_LOCATION, Location, User


class AccountRegisterRequest(BaseModel):
    """
    Schema for registering the account of a new user.

    Attributes:\n
        user (User): The registration identity, its `uid` becomes the account key.
        email (str): The Google account email.
        date_of_birth (str): Birthday as an ISO string.
        location (Location): Initial location, empty when not picked yet.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user: User
    email: str = ""
    date_of_birth: str = ""
    location: Location = EMPTY_LOCATION


class AccountEditRequest(BaseModel):
    """Schema for a partial account update. Blank or missing fields keep their current value."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str | None = Field(None, max_length=255)
    birthday: str | None = None
    picture: str | None = Field(None, description="URL of the new profile picture")
    location: Location | None = None


class PrivacyResponse(BaseModel):
    """Schema for the result of a privacy toggle."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_private: bool


class FriendshipResponse(BaseModel):
    """Schema for a friendship membership query."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    friend_id: str
    is_friend: bool
