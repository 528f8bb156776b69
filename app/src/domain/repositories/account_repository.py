from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.core.exceptions import errors
from src.core.helpers import KeyedLock
from src.core.logging import add_to_log_context, get_logger
from src.domain.models import EMPTY_LOCATION, Account, Location, PublicLocation, User
from src.domain.repositories.account_store import AccountStore
from src.domain.repositories.public_location_repository import PublicLocationIndex
from src.domain.repositories.starred_item_cache import StarredItemCache
from src.libs.document_store import DocumentStoreProvider

logger = get_logger(__name__)


class AccountRepository:
    """
    Single entry point for account state.

    Account operations go to the `AccountStore`, which keeps the public
    location index in step with each account. Starred items are served by the
    `StarredItemCache`. Operations that only take an item id act on the
    current user the repository was built for.

    Mutations of one account are serialized; the lock registry and the
    starred cache can be shared between repositories built for different
    callers so that the serialization holds across requests.
    """

    def __init__(
        self,
        store: DocumentStoreProvider,
        current_user_id: str | None = None,
        *,
        accounts: AccountStore | None = None,
        starred_items: StarredItemCache | None = None,
        account_locks: KeyedLock | None = None,
    ) -> None:
        self.store = store
        self.current_user_id = current_user_id
        self.public_locations = accounts.public_locations if accounts else PublicLocationIndex(store)
        self.accounts = accounts or AccountStore(store, self.public_locations)
        self.starred_items = starred_items or StarredItemCache(self.accounts)
        self.account_locks = account_locks if account_locks is not None else KeyedLock()

    def for_user(self, current_user_id: str | None) -> AccountRepository:
        """A repository acting for another caller, sharing this one's store, cache and locks."""
        return AccountRepository(
            self.store,
            current_user_id,
            accounts=self.accounts,
            starred_items=self.starred_items,
            account_locks=self.account_locks,
        )

    def _current_user(self) -> str:
        if not self.current_user_id:
            raise errors.UnauthorizedError(detail="No current user is set for this operation")
        return self.current_user_id

    @asynccontextmanager
    async def _mutating(self, user_id: str) -> AsyncIterator[None]:
        async with self.account_locks.hold(user_id):
            with add_to_log_context(owner_id=user_id):
                yield

    async def create_account(
        self,
        user: User,
        email: str = "",
        date_of_birth: str = "",
        location: Location = EMPTY_LOCATION,
    ) -> Account:
        async with self._mutating(user.uid):
            return await self.accounts.create_account(user, email, date_of_birth, location)

    async def add_account(self, account: Account) -> Account:
        async with self._mutating(account.key):
            return await self.accounts.add_account(account)

    async def get_all_accounts(self) -> list[Account]:
        return await self.accounts.get_all_accounts()

    async def get_account(self, user_id: str) -> Account:
        return await self.accounts.get_account(user_id)

    async def account_exists(self, user_id: str) -> bool:
        return await self.accounts.account_exists(user_id)

    async def add_friend(self, user_id: str, friend_id: str) -> bool:
        async with self._mutating(user_id):
            return await self.accounts.add_friend(user_id, friend_id)

    async def remove_friend(self, user_id: str, friend_id: str) -> bool:
        async with self._mutating(user_id):
            return await self.accounts.remove_friend(user_id, friend_id)

    async def is_my_friend(self, user_id: str, friend_id: str) -> bool:
        return await self.accounts.is_my_friend(user_id, friend_id)

    async def toggle_privacy(self, user_id: str) -> bool:
        async with self._mutating(user_id):
            return await self.accounts.toggle_privacy(user_id)

    async def edit_account(
        self,
        user_id: str,
        username: str | None = None,
        birthday: str | None = None,
        picture: str | None = None,
        location: Location | None = None,
    ) -> Account:
        async with self._mutating(user_id):
            return await self.accounts.edit_account(user_id, username, birthday, picture, location)

    async def delete_profile_picture(self, user_id: str) -> None:
        async with self._mutating(user_id):
            await self.accounts.delete_profile_picture(user_id)

    async def delete_account(self, user_id: str) -> None:
        """Delete the account, its public location and its cached starred items."""
        async with self._mutating(user_id):
            await self.accounts.delete_account(user_id)
            self.starred_items.evict(user_id)
            logger.info(f"Deleted account {user_id}")

    async def get_public_locations(self) -> list[PublicLocation]:
        return await self.public_locations.get_all()

    async def get_items_list(self, user_id: str) -> list[str]:
        return await self.accounts.get_items_list(user_id)

    async def add_item(self, item_id: str) -> bool:
        user_id = self._current_user()
        async with self._mutating(user_id):
            return await self.accounts.add_item(user_id, item_id)

    async def remove_item(self, item_id: str) -> bool:
        user_id = self._current_user()
        async with self._mutating(user_id):
            return await self.accounts.remove_item(user_id, item_id)

    async def get_starred_items(self, user_id: str | None = None) -> list[str]:
        return await self.starred_items.get(user_id or self._current_user())

    async def add_starred_item(self, item_id: str) -> bool:
        return await self.starred_items.add(self._current_user(), item_id)

    async def remove_starred_item(self, item_id: str) -> bool:
        return await self.starred_items.remove(self._current_user(), item_id)

    async def toggle_starred_item(self, item_id: str) -> list[str]:
        return await self.starred_items.toggle(self._current_user(), item_id)

    async def refresh_starred_items(self, user_id: str | None = None) -> list[str]:
        return await self.starred_items.refresh(user_id or self._current_user())
