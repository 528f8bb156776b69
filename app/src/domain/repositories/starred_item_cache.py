from __future__ import annotations

from src.core.exceptions import errors
from src.core.helpers import KeyedLock
from src.core.logging import get_logger, log_exception_with_context
from src.domain.repositories.account_store import AccountStore

logger = get_logger(__name__)


class StarredItemCache:
    """
    Per-user write-through cache of starred item ids.

    A user's list is loaded from the account document on first use and kept in
    memory afterwards. Every change is applied to the cached list first and
    then written to the account with an array union or removal. Each user has
    its own lock, so changes for one user never interleave.
    """

    def __init__(self, accounts: AccountStore) -> None:
        self.accounts = accounts
        self._starred: dict[str, list[str]] = {}
        self.locks = KeyedLock()

    def is_cached(self, user_id: str) -> bool:
        return user_id in self._starred

    async def _load(self, user_id: str) -> list[str]:
        # caller holds the user's lock
        starred = self._starred.get(user_id)
        if starred is None:
            starred = list(await self.accounts.get_starred_item_uids(user_id))
            self._starred[user_id] = starred
            logger.debug(f"Loaded {len(starred)} starred items of {user_id}")
        return starred

    async def get(self, user_id: str) -> list[str]:
        """
        Get the starred item ids of a user, loading them on first access.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        async with self.locks.hold(user_id):
            return list(await self._load(user_id))

    async def add(self, user_id: str, item_id: str) -> bool:
        """
        Star an item. Starring an already starred item changes nothing locally.

        Raises:
            StarredItemSyncError: If the account could not be updated; the cache keeps the change
        """
        async with self.locks.hold(user_id):
            await self._add(user_id, item_id)
        return True

    async def remove(self, user_id: str, item_id: str) -> bool:
        """
        Unstar an item. Unstarring an item that is not starred succeeds.

        Raises:
            StarredItemSyncError: If the account could not be updated; the cache keeps the change
        """
        async with self.locks.hold(user_id):
            await self._remove(user_id, item_id)
        return True

    async def toggle(self, user_id: str, item_id: str) -> list[str]:
        """Unstar the item if it is starred, star it otherwise. Returns the resulting list."""
        async with self.locks.hold(user_id):
            if item_id in await self._load(user_id):
                starred = await self._remove(user_id, item_id)
            else:
                starred = await self._add(user_id, item_id)
            return list(starred)

    async def refresh(self, user_id: str) -> list[str]:
        """Replace the cached list with the one currently stored on the account."""
        async with self.locks.hold(user_id):
            self._starred.pop(user_id, None)
            return list(await self._load(user_id))

    def evict(self, user_id: str) -> None:
        self._starred.pop(user_id, None)

    async def _add(self, user_id: str, item_id: str) -> list[str]:
        starred = await self._load(user_id)
        if item_id not in starred:
            starred.append(item_id)

        try:
            await self.accounts.add_starred_item_uid(user_id, item_id)
        except errors.DatabaseError as e:
            raise self._sync_error("add", user_id, item_id, e) from e
        return starred

    async def _remove(self, user_id: str, item_id: str) -> list[str]:
        starred = await self._load(user_id)
        if item_id in starred:
            starred.remove(item_id)

        try:
            await self.accounts.remove_starred_item_uid(user_id, item_id)
        except errors.DatabaseError as e:
            raise self._sync_error("remove", user_id, item_id, e) from e
        return starred

    def _sync_error(self, action: str, user_id: str, item_id: str, exc: Exception) -> errors.StarredItemSyncError:
        log_exception_with_context(
            exc,
            message=f"Starred item {action} of {item_id} for {user_id} was not saved",
            extra_context={"event_type": "starred_item_sync_failed", "owner_id": user_id, "item_id": item_id},
            target=logger,
        )
        return errors.StarredItemSyncError(metadata={"owner_id": user_id, "item_id": item_id, "action": action})
