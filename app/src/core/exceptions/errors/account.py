from fastapi import status

from .base import NotFoundError, ServiceError


class AccountNotFoundError(NotFoundError):
    """
    This error is raised when an account (or the friend account of an operation) does not exist.
    """

    type_ = "account_not_found"
    title = "Account Not Found"
    detail = "The requested account does not exist"


class DuplicateAccountError(ServiceError):
    """
    This error is raised when adding an account whose owner id is already registered.
    """

    type_ = "duplicate_account"
    title = "Account Already Exists"
    detail = "An account with the provided owner id already exists"
    status = status.HTTP_409_CONFLICT


class TakenUsernameError(ServiceError):
    """
    This error is raised when a username is already used by another account.
    """

    type_ = "taken_username"
    title = "Username Already Taken"
    detail = "Username already in use"
    status = status.HTTP_409_CONFLICT


class InvalidLocationError(ServiceError):
    """
    This error is raised when an account would become publicly visible with an invalid location.
    """

    type_ = "invalid_location"
    title = "Invalid Location"
    detail = "Location must be selected"


class StarredItemSyncError(ServiceError):
    """
    This error is raised when a starred item change was applied locally but could not be persisted remotely.
    """

    type_ = "starred_item_sync_error"
    title = "Starred Items Not Synchronized"
    detail = "The starred item change was applied locally but could not be saved"
    status = status.HTTP_503_SERVICE_UNAVAILABLE
