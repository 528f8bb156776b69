from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from src.domain.models.location import EMPTY_LOCATION, Location


class Account(BaseModel):
    """
    Represents a user's account document.

    Attributes:\n
        uid (str): Document id, the owner's user id.
        owner_id (str): The owner's user id, always equal to `uid` once stored.
        username (str): Display name (may be blank).
        birthday (str): Birthday as an ISO string (may be blank).
        google_account_email (str): Linked Google account email (may be blank).
        profile_picture (str): URL of the profile picture or an empty string.
        friend_uids (list[str]): Ids of the owner's friends, without duplicates.
        location (Location): The owner's location.
        is_private (bool): Whether the account is hidden from the public map.
        items_uids (list[str]): Ids of the owner's inventory items.
        starred_item_uids (list[str]): Ids of the items the owner starred, in starring order.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    uid: str = ""
    owner_id: str = ""
    username: str = ""
    birthday: str = ""
    google_account_email: str = ""
    profile_picture: str = ""
    friend_uids: list[str] = Field(default_factory=list)
    location: Location = EMPTY_LOCATION
    is_private: bool = False
    items_uids: list[str] = Field(default_factory=list)
    starred_item_uids: list[str] = Field(default_factory=list)

    @property
    def key(self) -> str:
        """The document key the account is stored under."""
        return self.owner_id or self.uid

    def to_document(self) -> dict[str, Any]:
        """Convert to the stored camelCase document."""
        return {
            "uid": self.key,
            "ownerId": self.key,
            "username": self.username,
            "birthday": self.birthday,
            "googleAccountEmail": self.google_account_email,
            "profilePicture": self.profile_picture,
            "friendUids": list(self.friend_uids),
            "location": self.location.to_document(),
            "isPrivate": self.is_private,
            "itemsUids": list(self.items_uids),
            "starredItemUids": list(self.starred_item_uids),
        }

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> Self:
        """
        Build an account from a stored document. The document id is the owner id.

        Raises:
            ValueError: If the id is blank or `friendUids` is not a list
        """
        if not doc_id or not doc_id.strip():
            raise ValueError("Invalid account data: uid is blank")

        friends = data.get("friendUids")
        if friends is None:
            friends = []
        elif not isinstance(friends, list):
            raise ValueError(f"friendUids field is not a list but {type(friends).__name__}")

        return cls(
            uid=doc_id,
            owner_id=doc_id,
            username=_string(data.get("username")),
            birthday=_string(data.get("birthday")),
            google_account_email=_string(data.get("googleAccountEmail")),
            profile_picture=_string(data.get("profilePicture")),
            friend_uids=_string_list(friends),
            location=Location.from_document(data.get("location")),
            is_private=data.get("isPrivate") is True,
            items_uids=_string_list(data.get("itemsUids")),
            starred_item_uids=_string_list(data.get("starredItemUids")),
        )


class PublicLocation(BaseModel):
    """
    Publicly visible projection of a public account, shown on the map.

    Attributes:\n
        owner_id (str): The account owner's id.
        username (str): The owner's display name.
        location (Location): The owner's current location.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    owner_id: str = ""
    username: str = ""
    location: Location = EMPTY_LOCATION

    @classmethod
    def of(cls, account: Account) -> Self:
        return cls(owner_id=account.key, username=account.username, location=account.location)

    def to_document(self) -> dict[str, Any]:
        return {"ownerId": self.owner_id, "username": self.username, "location": self.location.to_document()}

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Self:
        return cls(
            owner_id=_string(data.get("ownerId")),
            username=_string(data.get("username")),
            location=Location.from_document(data.get("location")),
        )


def _string(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _string_list(value: Any) -> list[str]:
    """Keep the string entries of a stored array, dropping duplicates but not order."""
    if not isinstance(value, list):
        return []
    return list(dict.fromkeys(item for item in value if isinstance(item, str)))
