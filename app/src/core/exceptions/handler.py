from fastapi_problem.cors import CorsConfiguration
from fastapi_problem.handler import new_exception_handler
from src.core.config import settings
from src.core.constants import OWNER_ID_HEADER, REQUEST_ID_HEADER

eh = new_exception_handler(
    cors=CorsConfiguration(
        allow_origins=[str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS],
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", OWNER_ID_HEADER, REQUEST_ID_HEADER],
        allow_credentials=True,
    ),
    documentation_uri_template=f"{settings.SERVER_URL}/errors/{{type}}",
    strict_rfc9457=True,
)
