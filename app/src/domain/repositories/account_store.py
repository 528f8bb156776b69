from __future__ import annotations

import logging
from typing import Any

from src.core.config import settings
from src.core.exceptions import errors
from src.core.logging import get_logger, log_exception_with_context
from src.domain.models import EMPTY_LOCATION, Account, Location, User, is_valid_location
from src.domain.repositories.base_repository import BaseRepository
from src.domain.repositories.public_location_repository import PublicLocationIndex
from src.libs.document_store import Document, DocumentStoreProvider

logger = get_logger(__name__)


class AccountStore(BaseRepository):
    """
    Repository for account documents.

    Every operation that changes whether an account is public, or what a
    public account shows on the map, updates the public location index before
    returning: the account write and the index write both happen or the
    account write is undone and the failure is raised. Removing an index entry
    is best effort.
    """

    not_found_error = errors.AccountNotFoundError

    def __init__(
        self,
        store: DocumentStoreProvider,
        public_locations: PublicLocationIndex | None = None,
        collection: str | None = None,
    ) -> None:
        super().__init__(store, collection or settings.ACCOUNTS_COLLECTION)
        self.public_locations = public_locations or PublicLocationIndex(store)

    def _to_account(self, key: str, document: Document) -> Account:
        try:
            return Account.from_document(key, document)
        except ValueError as e:
            logger.exception(f"src.domain.repositories.account_store._to_account:: error transforming document {key}: {e}")
            raise errors.DatabaseError(
                detail="Failed to read the account.",
                metadata={"id": key},
            ) from e

    async def find_account(self, user_id: str) -> Account | None:
        """Get an account by owner id, or None when it does not exist."""
        document = await self.find_document(user_id)
        return self._to_account(user_id, document) if document is not None else None

    async def get_account(self, user_id: str) -> Account:
        """
        Get an account by owner id.

        Raises:
            AccountNotFoundError: If no account exists for the id
        """
        account = await self.find_account(user_id)
        if account is None:
            raise errors.AccountNotFoundError(detail=f"Account with ID {user_id} not found")
        return account

    async def get_all_accounts(self) -> list[Account]:
        """Every readable account. Documents that cannot be decoded are skipped."""
        accounts = []
        for document in await self.find_all_documents():
            key = document.get("ownerId") or document.get("uid") or ""
            try:
                accounts.append(Account.from_document(key, document))
            except ValueError as e:
                logger.error(f"src.domain.repositories.account_store.get_all_accounts:: skipping account {key!r}: {e}")
        return accounts

    async def account_exists(self, user_id: str) -> bool:
        """True if the account exists and has finished registration (non-blank username)."""
        account = await self.find_account(user_id)
        return account is not None and bool(account.username.strip())

    async def is_username_taken(self, username: str, uid: str) -> bool:
        """True if another owner already uses the username."""
        return any(account.username == username and account.key != uid for account in await self.get_all_accounts())

    async def add_account(self, account: Account) -> Account:
        """
        Insert a new account, and its public location when the account is public.

        Args:
            account (Account): The account to add

        Returns:
            Account: The stored account

        Raises:
            DuplicateAccountError: If an account already exists for the owner id
            InvalidLocationError: If the account is public without a valid location
        """
        key = account.key
        if not key.strip():
            raise errors.ServiceError(detail="Account owner id must not be blank")

        if await self.find_document(key) is not None:
            raise errors.DuplicateAccountError(detail=f"Account with UID {key} already exists")

        stored = Account.model_validate(
            {**account.model_dump(), "uid": key, "owner_id": key, **_dedupe_arrays(account)},
        )

        if not stored.is_private and not is_valid_location(stored.location):
            raise errors.InvalidLocationError(metadata={"id": key})

        await self.write_document(key, stored.to_document())

        if not stored.is_private:
            try:
                await self.public_locations.upsert(stored)
            except errors.DatabaseError:
                await self._undo(key, "add_account", None)
                raise

        logger.info(f"Successfully added account with UID: {key}")
        return stored

    async def create_account(
        self,
        user: User,
        email: str = "",
        date_of_birth: str = "",
        location: Location = EMPTY_LOCATION,
        is_private: bool = False,
    ) -> Account:
        """
        Create the account of a freshly registered user.

        Raises:
            TakenUsernameError: If another owner already uses the username
        """
        if user.username.strip() and await self.is_username_taken(user.username, user.uid):
            logger.error(f"src.domain.repositories.account_store.create_account:: username {user.username!r} in use")
            raise errors.TakenUsernameError(metadata={"username": user.username})

        return await self.add_account(
            Account(
                uid=user.uid,
                owner_id=user.uid,
                username=user.username,
                birthday=date_of_birth,
                google_account_email=email,
                profile_picture=user.profile_picture,
                location=location,
                is_private=is_private,
            )
        )

    async def edit_account(
        self,
        user_id: str,
        username: str | None = None,
        birthday: str | None = None,
        picture: str | None = None,
        location: Location | None = None,
    ) -> Account:
        """
        Partially update an account. Blank values (and a location without a
        name) keep the current value.

        Raises:
            AccountNotFoundError: If the account does not exist
            InvalidLocationError: If the account is public and would end up with an invalid location
        """
        previous = await self.get_account(user_id)

        changes: dict[str, Any] = {}
        if username and username.strip():
            changes["username"] = username
        if birthday and birthday.strip():
            changes["birthday"] = birthday
        if picture and picture.strip():
            changes["profile_picture"] = picture
        if location is not None and location.name.strip():
            changes["location"] = location

        updated = previous.model_copy(update=changes)

        if not updated.is_private and not is_valid_location(updated.location):
            raise errors.InvalidLocationError(metadata={"id": user_id})

        if changes:
            await self.update_fields(user_id, **_profile_fields(updated))

        if not updated.is_private:
            try:
                await self.public_locations.upsert(updated)
            except errors.DatabaseError:
                if changes:
                    await self._undo(user_id, "edit_account", _profile_fields(previous))
                raise

        return updated

    async def delete_profile_picture(self, user_id: str) -> None:
        await self.update_fields(user_id, profilePicture="")

    async def delete_account(self, user_id: str) -> None:
        """
        Delete an account and drop its public location.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        if await self.find_document(user_id) is None:
            raise errors.AccountNotFoundError(detail=f"Account with ID {user_id} not found")

        await self.delete_document(user_id)
        await self._remove_public_location(user_id, "delete_account")

    async def toggle_privacy(self, user_id: str) -> bool:
        """
        Flip the account between private and public.

        Going public requires a valid location and publishes it; going private
        removes the public location. The privacy flag is left untouched if
        publishing fails.

        Returns:
            bool: The new `is_private` value

        Raises:
            AccountNotFoundError: If the account does not exist
            InvalidLocationError: If the account would go public without a valid location
        """
        account = await self.get_account(user_id)
        new_is_private = not account.is_private

        if not new_is_private:
            if not is_valid_location(account.location):
                raise errors.InvalidLocationError(metadata={"id": user_id})

            await self.update_fields(user_id, isPrivate=False)
            try:
                await self.public_locations.upsert(account.model_copy(update={"is_private": False}))
            except errors.DatabaseError:
                await self._undo(user_id, "toggle_privacy", {"isPrivate": True})
                raise
        else:
            await self.update_fields(user_id, isPrivate=True)
            await self._remove_public_location(user_id, "toggle_privacy")

        return new_is_private

    async def add_friend(self, user_id: str, friend_id: str) -> bool:
        """
        Add `friend_id` to the friends of `user_id`. Adding an existing friend succeeds.

        Raises:
            AccountNotFoundError: If either account does not exist
        """
        await self._require_friend(friend_id)
        await self.add_to_array(user_id, "friendUids", friend_id)
        return True

    async def remove_friend(self, user_id: str, friend_id: str) -> bool:
        """
        Remove `friend_id` from the friends of `user_id`. Removing a non-friend succeeds.

        Raises:
            AccountNotFoundError: If either account does not exist
        """
        await self._require_friend(friend_id)
        await self.remove_from_array(user_id, "friendUids", friend_id)
        return True

    async def is_my_friend(self, user_id: str, friend_id: str) -> bool:
        account = await self.get_account(user_id)
        return friend_id in account.friend_uids

    async def get_items_list(self, user_id: str) -> list[str]:
        return (await self.get_account(user_id)).items_uids

    async def add_item(self, user_id: str, item_id: str) -> bool:
        await self.add_to_array(user_id, "itemsUids", item_id)
        return True

    async def remove_item(self, user_id: str, item_id: str) -> bool:
        await self.remove_from_array(user_id, "itemsUids", item_id)
        return True

    async def get_starred_item_uids(self, user_id: str) -> list[str]:
        return (await self.get_account(user_id)).starred_item_uids

    async def add_starred_item_uid(self, user_id: str, item_id: str) -> list[str]:
        return await self.add_to_array(user_id, "starredItemUids", item_id)

    async def remove_starred_item_uid(self, user_id: str, item_id: str) -> list[str]:
        return await self.remove_from_array(user_id, "starredItemUids", item_id)

    async def _require_friend(self, friend_id: str) -> None:
        if await self.find_document(friend_id) is None:
            raise errors.AccountNotFoundError(detail=f"Friend with ID {friend_id} not found")

    async def _remove_public_location(self, user_id: str, action: str) -> None:
        """Drop a public location; failures are logged and not raised."""
        try:
            await self.public_locations.remove(user_id)
        except errors.DatabaseError as e:
            log_exception_with_context(
                e,
                message=f"Could not remove public location of {user_id} during {action}",
                level=logging.WARNING,
                extra_context={"event_type": "public_location_removal_failed", "owner_id": user_id},
                target=logger,
            )

    async def _undo(self, user_id: str, action: str, previous_fields: Document | None) -> None:
        """
        Revert an account write after the public location write failed.
        `None` deletes the account. A failing undo is logged so the original
        error stays the one raised.
        """
        try:
            if previous_fields is None:
                await self.delete_document(user_id)
            else:
                await self.update_fields(user_id, **previous_fields)
        except (errors.DatabaseError, errors.NotFoundError) as e:
            log_exception_with_context(
                e,
                message=f"Could not revert account {user_id} after a failed {action}",
                extra_context={"event_type": "account_rollback_failed", "owner_id": user_id},
                target=logger,
            )
        else:
            logger.warning(
                f"Reverted account {user_id} after a failed {action}",
                extra={"event_type": "account_rolled_back", "owner_id": user_id},
            )


def _profile_fields(account: Account) -> Document:
    return {
        "username": account.username,
        "birthday": account.birthday,
        "profilePicture": account.profile_picture,
        "location": account.location.to_document(),
    }


def _dedupe_arrays(account: Account) -> dict[str, list[str]]:
    return {
        "friend_uids": list(dict.fromkeys(account.friend_uids)),
        "items_uids": list(dict.fromkeys(account.items_uids)),
        "starred_item_uids": list(dict.fromkeys(account.starred_item_uids)),
    }
