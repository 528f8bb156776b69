from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi_problem.error import StatusProblem
from src.core.dependencies import get_account_repository
from src.core.exceptions import errors
from src.core.helpers.response import IResponseBase, build_list_response
from src.core.logging import get_logger
from src.domain.models import PublicLocation
from src.domain.repositories import AccountRepository

logger = get_logger(__name__)

router = APIRouter()


@router.get("/public-locations", response_model=IResponseBase[list[PublicLocation]])
async def public_locations(
    repository: Annotated[AccountRepository, Depends(get_account_repository)],
) -> IResponseBase[list[PublicLocation]]:
    """
    Get the location of every public account
    """
    try:
        data = await repository.get_public_locations()
        return build_list_response(data)
    except StatusProblem:
        raise
    except Exception as e:
        logger.error("Error retrieving public locations", exc_info=e)
        raise errors.ServiceError(detail="Failed to retrieve public locations") from e
