from typing import Annotated

from fastapi import APIRouter, Body, Depends, Path, status
from fastapi_problem.error import StatusProblem
from src.core.constants import CURRENT_USER_ALIAS
from src.core.dependencies import get_account_repository, requires_owner
from src.core.exceptions import errors
from src.core.helpers.response import IResponseBase, build_json_response, build_list_response
from src.core.logging import get_logger
from src.domain.models import Account
from src.domain.repositories import AccountRepository
from src.domain.schemas import AccountEditRequest, AccountRegisterRequest, FriendshipResponse, PrivacyResponse

logger = get_logger(__name__)

router = APIRouter()

Repository = Annotated[AccountRepository, Depends(get_account_repository)]
UserId = Annotated[str, Path(min_length=1, description=f"Owner id of the account, or '{CURRENT_USER_ALIAS}'")]


def _resolve(user_id: str, repository: AccountRepository) -> str:
    """Map the `me` alias to the caller's owner id."""
    if user_id != CURRENT_USER_ALIAS:
        return user_id
    if not repository.current_user_id:
        raise errors.UnauthorizedError(detail=f"'{CURRENT_USER_ALIAS}' requires an identified caller")
    return repository.current_user_id


def _unexpected(action: str, e: Exception) -> errors.ServiceError:
    logger.error(f"Error while trying to {action}", exc_info=e)
    return errors.ServiceError(detail=f"Failed to {action}")


@router.get("", response_model=IResponseBase[list[Account]])
async def list_accounts(repository: Repository) -> IResponseBase[list[Account]]:
    """
    List every account
    """
    try:
        data = await repository.get_all_accounts()
        return build_list_response(data, message="Accounts retrieved successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("list accounts", e) from e


@router.post("", response_model=IResponseBase[Account], status_code=status.HTTP_201_CREATED)
async def add_account(
    repository: Repository,
    account: Annotated[Account, Body(...)],
) -> IResponseBase[Account]:
    """
    Add an account, publishing its location when it is public
    """
    try:
        data = await repository.add_account(account)
        return build_json_response(data=data, message="Account added successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("add account", e) from e


@router.post("/register", response_model=IResponseBase[Account], status_code=status.HTTP_201_CREATED)
async def register_account(
    repository: Repository,
    registration: Annotated[AccountRegisterRequest, Body(...)],
) -> IResponseBase[Account]:
    """
    Create the account of a newly registered user
    """
    try:
        data = await repository.create_account(
            registration.user,
            email=registration.email,
            date_of_birth=registration.date_of_birth,
            location=registration.location,
        )
        return build_json_response(data=data, message="Account created successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("create account", e) from e


@router.put("/me/items/{item_id}", response_model=IResponseBase[bool])
async def add_item(
    repository: Repository,
    owner_id: Annotated[str, Depends(requires_owner)],  # noqa: ARG001
    item_id: Annotated[str, Path(min_length=1)],
) -> IResponseBase[bool]:
    """
    Add an item to the caller's inventory
    """
    try:
        data = await repository.add_item(item_id)
        return build_json_response(data=data, message="Item added successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("add item", e) from e


@router.delete("/me/items/{item_id}", response_model=IResponseBase[bool])
async def remove_item(
    repository: Repository,
    owner_id: Annotated[str, Depends(requires_owner)],  # noqa: ARG001
    item_id: Annotated[str, Path(min_length=1)],
) -> IResponseBase[bool]:
    """
    Remove an item from the caller's inventory
    """
    try:
        data = await repository.remove_item(item_id)
        return build_json_response(data=data, message="Item removed successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("remove item", e) from e


@router.put("/me/starred/{item_id}", response_model=IResponseBase[bool])
async def star_item(
    repository: Repository,
    owner_id: Annotated[str, Depends(requires_owner)],  # noqa: ARG001
    item_id: Annotated[str, Path(min_length=1)],
) -> IResponseBase[bool]:
    """
    Star an item for the caller
    """
    try:
        data = await repository.add_starred_item(item_id)
        return build_json_response(data=data, message="Item starred successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("star item", e) from e


@router.delete("/me/starred/{item_id}", response_model=IResponseBase[bool])
async def unstar_item(
    repository: Repository,
    owner_id: Annotated[str, Depends(requires_owner)],  # noqa: ARG001
    item_id: Annotated[str, Path(min_length=1)],
) -> IResponseBase[bool]:
    """
    Unstar an item for the caller
    """
    try:
        data = await repository.remove_starred_item(item_id)
        return build_json_response(data=data, message="Item unstarred successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("unstar item", e) from e


@router.post("/me/starred/{item_id}/toggle", response_model=IResponseBase[list[str]])
async def toggle_starred_item(
    repository: Repository,
    owner_id: Annotated[str, Depends(requires_owner)],  # noqa: ARG001
    item_id: Annotated[str, Path(min_length=1)],
) -> IResponseBase[list[str]]:
    """
    Star or unstar an item for the caller, returning the resulting starred items
    """
    try:
        data = await repository.toggle_starred_item(item_id)
        return build_json_response(data=data, message="Starred items updated successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("toggle starred item", e) from e


@router.get("/{user_id}", response_model=IResponseBase[Account])
async def get_account(repository: Repository, user_id: UserId) -> IResponseBase[Account]:
    """
    Get an account by owner id
    """
    try:
        data = await repository.get_account(_resolve(user_id, repository))
        return build_json_response(data=data, message="Account retrieved successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("retrieve account", e) from e


@router.get("/{user_id}/exists", response_model=IResponseBase[bool])
async def account_exists(repository: Repository, user_id: UserId) -> IResponseBase[bool]:
    """
    Check whether an account exists and has finished registration
    """
    try:
        data = await repository.account_exists(_resolve(user_id, repository))
        return build_json_response(data=data)
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("check account", e) from e


@router.patch("/{user_id}", response_model=IResponseBase[Account])
async def edit_account(
    repository: Repository,
    user_id: UserId,
    changes: Annotated[AccountEditRequest, Body(...)],
) -> IResponseBase[Account]:
    """
    Update an account, keeping the current value of every blank field
    """
    try:
        data = await repository.edit_account(
            _resolve(user_id, repository),
            username=changes.username,
            birthday=changes.birthday,
            picture=changes.picture,
            location=changes.location,
        )
        return build_json_response(data=data, message="Account updated successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("update account", e) from e


@router.delete("/{user_id}", response_model=IResponseBase[None])
async def delete_account(repository: Repository, user_id: UserId) -> IResponseBase[None]:
    """
    Delete an account together with its public location
    """
    try:
        await repository.delete_account(_resolve(user_id, repository))
        return build_json_response(data=None, message="Account deleted successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("delete account", e) from e


@router.delete("/{user_id}/profile-picture", response_model=IResponseBase[None])
async def delete_profile_picture(repository: Repository, user_id: UserId) -> IResponseBase[None]:
    """
    Clear the profile picture of an account
    """
    try:
        await repository.delete_profile_picture(_resolve(user_id, repository))
        return build_json_response(data=None, message="Profile picture deleted successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("delete profile picture", e) from e


@router.post("/{user_id}/privacy/toggle", response_model=IResponseBase[PrivacyResponse])
async def toggle_privacy(repository: Repository, user_id: UserId) -> IResponseBase[PrivacyResponse]:
    """
    Switch an account between private and public
    """
    try:
        is_private = await repository.toggle_privacy(_resolve(user_id, repository))
        return build_json_response(data=PrivacyResponse(is_private=is_private), message="Privacy updated successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("toggle privacy", e) from e


@router.get("/{user_id}/friends/{friend_id}", response_model=IResponseBase[FriendshipResponse])
async def is_my_friend(
    repository: Repository,
    user_id: UserId,
    friend_id: Annotated[str, Path(min_length=1)],
) -> IResponseBase[FriendshipResponse]:
    """
    Check whether `friend_id` is a friend of the account
    """
    try:
        is_friend = await repository.is_my_friend(_resolve(user_id, repository), friend_id)
        return build_json_response(data=FriendshipResponse(friend_id=friend_id, is_friend=is_friend))
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("check friendship", e) from e


@router.put("/{user_id}/friends/{friend_id}", response_model=IResponseBase[bool])
async def add_friend(
    repository: Repository,
    user_id: UserId,
    friend_id: Annotated[str, Path(min_length=1)],
) -> IResponseBase[bool]:
    """
    Add a friend to the account
    """
    try:
        data = await repository.add_friend(_resolve(user_id, repository), friend_id)
        return build_json_response(data=data, message="Friend added successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("add friend", e) from e


@router.delete("/{user_id}/friends/{friend_id}", response_model=IResponseBase[bool])
async def remove_friend(
    repository: Repository,
    user_id: UserId,
    friend_id: Annotated[str, Path(min_length=1)],
) -> IResponseBase[bool]:
    """
    Remove a friend from the account
    """
    try:
        data = await repository.remove_friend(_resolve(user_id, repository), friend_id)
        return build_json_response(data=data, message="Friend removed successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("remove friend", e) from e


@router.get("/{user_id}/items", response_model=IResponseBase[list[str]])
async def get_items(repository: Repository, user_id: UserId) -> IResponseBase[list[str]]:
    """
    List the inventory item ids of an account
    """
    try:
        data = await repository.get_items_list(_resolve(user_id, repository))
        return build_list_response(data)
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("list items", e) from e


@router.get("/{user_id}/starred", response_model=IResponseBase[list[str]])
async def get_starred_items(repository: Repository, user_id: UserId) -> IResponseBase[list[str]]:
    """
    List the starred item ids of an account
    """
    try:
        data = await repository.get_starred_items(_resolve(user_id, repository))
        return build_list_response(data)
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("list starred items", e) from e


@router.post("/{user_id}/starred/refresh", response_model=IResponseBase[list[str]])
async def refresh_starred_items(repository: Repository, user_id: UserId) -> IResponseBase[list[str]]:
    """
    Reload the starred item ids of an account from the store
    """
    try:
        data = await repository.refresh_starred_items(_resolve(user_id, repository))
        return build_json_response(data=data, message="Starred items refreshed successfully")
    except StatusProblem:
        raise
    except Exception as e:
        raise _unexpected("refresh starred items", e) from e
