import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from src.core.constants import OWNER_ID_HEADER, REQUEST_ID_HEADER
from src.core.logging import add_to_log_context, get_logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id and the caller's owner id to the logging context for
    the whole request, and logs each request's start and outcome.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        trust_request_id: bool = False,
        request_id_generator: Callable[[], str] = lambda: uuid.uuid4().hex,
        enable_request_logging: bool = True,
    ) -> None:
        super().__init__(app)

        self.trust_request_id = trust_request_id
        self.request_id_generator = request_id_generator
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        request_id = self._get_request_id(request)
        request.state.request_id = request_id

        request_context = {
            "request_id": request_id,
            "owner_id": request.headers.get(OWNER_ID_HEADER),
            "method": request.method,
            "path": request.url.path,
        }

        start_time = time.perf_counter()

        with add_to_log_context(**request_context):
            if self.enable_request_logging:
                logger.info(
                    "Incoming %s request to %s",
                    request.method,
                    request.url.path,
                    extra={"event_type": "request_start"},
                )

            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    "Request processing failed for %s %s after %.2fms",
                    request.method,
                    request.url.path,
                    duration_ms,
                    exc_info=True,
                    extra={
                        "event_type": "request_error",
                        "duration_ms": duration_ms,
                        "exception_type": type(exc).__name__,
                    },
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id

            if self.enable_request_logging:
                logger.log(
                    self._get_log_level_for_status(response.status_code),
                    "%s request to %s completed with status %d in %.2fms",
                    request.method,
                    request.url.path,
                    response.status_code,
                    duration_ms,
                    extra={
                        "event_type": "request_complete",
                        "status_code": response.status_code,
                        "duration_ms": duration_ms,
                    },
                )

            return response

    def _get_request_id(self, request: Request) -> str:
        if self.trust_request_id:
            incoming_id = request.headers.get(REQUEST_ID_HEADER)
            if incoming_id and self._validate_request_id(incoming_id):
                return incoming_id
        return self.request_id_generator()

    def _validate_request_id(self, request_id: str) -> bool:
        return (
            len(request_id) <= 200
            and all(32 <= ord(c) <= 126 for c in request_id)
            and request_id.strip() == request_id
        )

    def _get_log_level_for_status(self, status_code: int) -> int:
        if status_code >= 500:
            return logging.ERROR
        elif status_code >= 400:
            return logging.WARNING
        else:
            return logging.INFO
