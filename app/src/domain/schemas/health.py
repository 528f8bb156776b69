from typing import Any

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Schema for the health check, including the document store state."""

    status: str
    document_store: bool
    stats: dict[str, Any] | None = None
