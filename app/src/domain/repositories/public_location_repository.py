from src.core.config import settings
from src.core.exceptions import errors
from src.core.logging import get_logger
from src.domain.models import Account, PublicLocation, is_valid_location
from src.domain.repositories.base_repository import BaseRepository
from src.libs.document_store import DocumentStoreProvider

logger = get_logger(__name__)


class PublicLocationIndex(BaseRepository):
    """
    Derived collection holding one entry per account visible on the map.

    Entries are never authored on their own: they are written from an account
    with `upsert` and dropped with `remove` by the account operations.
    """

    def __init__(self, store: DocumentStoreProvider, collection: str | None = None) -> None:
        super().__init__(store, collection or settings.PUBLIC_LOCATIONS_COLLECTION)

    async def upsert(self, account: Account) -> PublicLocation:
        """
        Write or overwrite the entry mirroring the account's username and location.

        Args:
            account (Account): The public account to mirror

        Returns:
            PublicLocation: The stored entry

        Raises:
            InvalidLocationError: If the account's location may not be shown on the map
        """
        if not is_valid_location(account.location):
            raise errors.InvalidLocationError(metadata={"owner_id": account.key})

        entry = PublicLocation.of(account)
        await self.write_document(entry.owner_id, entry.to_document())

        logger.debug(f"Public location of {entry.owner_id} set to {entry.location.name!r}")
        return entry

    async def remove(self, owner_id: str) -> bool:
        """
        Drop the entry of an owner. Removing a missing entry succeeds.

        Returns:
            bool: True if an entry existed
        """
        return await self.delete_document(owner_id)

    async def get(self, owner_id: str) -> PublicLocation | None:
        document = await self.find_document(owner_id)
        return PublicLocation.from_document(document) if document is not None else None

    async def get_all(self) -> list[PublicLocation]:
        """Every entry currently on the map."""
        return [PublicLocation.from_document(document) for document in await self.find_all_documents()]
