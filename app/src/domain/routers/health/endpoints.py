from typing import Annotated

from fastapi import APIRouter, Depends
from src.core.dependencies import get_document_store
from src.domain.schemas import HealthResponse
from src.libs.document_store import DocumentStoreProvider

router = APIRouter()


@router.get("/", include_in_schema=False, response_model=HealthResponse)
async def health_check(
    store: Annotated[DocumentStoreProvider, Depends(get_document_store)],
) -> HealthResponse:
    """
    Health check endpoint verifying the service and its document store are reachable.
    """
    healthy = await store.health_check()
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        document_store=healthy,
        stats=await store.get_stats() if healthy else None,
    )
