from typing import Annotated

from fastapi import Depends, Header, Request
from src.core.constants import OWNER_ID_HEADER
from src.core.exceptions import errors
from src.domain.repositories import AccountRepository
from src.libs.document_store import DocumentStoreProvider


def get_document_store(request: Request) -> DocumentStoreProvider:
    """
    Dependency to get the document store opened by the application lifespan.

    Returns:
        The document store provider instance
    """
    return request.app.state.document_store


def get_owner_id(
    x_owner_id: Annotated[
        str | None,
        Header(alias=OWNER_ID_HEADER, description="Id of the calling owner, set by the gateway"),
    ] = None,
) -> str | None:
    """The caller's owner id, or None for anonymous requests."""
    if x_owner_id is None or not x_owner_id.strip():
        return None
    return x_owner_id.strip()


def get_account_repository(
    request: Request,
    owner_id: Annotated[str | None, Depends(get_owner_id)],
) -> AccountRepository:
    """
    Dependency to get an account repository acting for the caller.

    The repository shares the application's starred item cache and account
    locks, so concurrent requests for one owner stay serialized.
    """
    return request.app.state.account_repository.for_user(owner_id)


def requires_owner(owner_id: Annotated[str | None, Depends(get_owner_id)]) -> str:
    """
    Dependency that requires the caller to identify as an owner.

    Raises:
        UnauthorizedError: If the owner header is missing
    """
    if owner_id is None:
        raise errors.UnauthorizedError(detail=f"The {OWNER_ID_HEADER} header is required")
    return owner_id
