import contextvars
import logging
import os
import socket
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Optional

from src.core.config import settings

_log_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar("log_context", default={})

# Marks records emitted outside of an HTTP request (startup, shutdown, scripts)
NO_REQUEST_ID = "-"


class BaseContextFilter(logging.Filter):
    """
    Base filter that enriches records and never drops them.
    Subclasses override `add_context`.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        self.add_context(record)
        return True

    def add_context(self, record: logging.LogRecord) -> None:
        pass


class CombinedContextFilter(BaseContextFilter):
    """
    Adds the process attributes (host, pid, environment, app name and
    version) and every value bound with `add_to_log_context` to the record.
    """

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self.process_context = {
            "hostname": socket.gethostname(),
            "process_id": os.getpid(),
            "environment": settings.ENVIRONMENT,
            "app_name": settings.APP_NAME,
            "app_version": settings.APP_VERSION,
        }

    def add_context(self, record: logging.LogRecord) -> None:
        for key, value in {**self.process_context, **_log_context.get()}.items():
            setattr(record, key, value)


class RequestIdFilter(BaseContextFilter):
    """Makes `%(request_id)s` usable in format strings outside of requests."""

    def add_context(self, record: logging.LogRecord) -> None:
        record.request_id = _log_context.get().get("request_id", NO_REQUEST_ID)


class NoiseReductionFilter(logging.Filter):
    """Drops records whose message contains one of `suppress_patterns`, health checks by default."""

    def __init__(self, name: str = "", suppress_patterns: Optional[Iterable[str]] = None) -> None:
        super().__init__(name)
        self.suppress_patterns = tuple(suppress_patterns or ("/health",))

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return not any(pattern in message for pattern in self.suppress_patterns)


@contextmanager
def add_to_log_context(**kwargs: Any):
    """
    Temporarily bind values that every log record emitted inside the block
    will carry.

    Example:
        with add_to_log_context(owner_id="u1"):
            logger.info("Editing account")
    """
    token = _log_context.set({**_log_context.get(), **kwargs})

    try:
        yield
    finally:
        _log_context.reset(token)


def get_log_context() -> Dict[str, Any]:
    """Return the values currently bound to the logging context."""
    return _log_context.get()


def clear_log_context() -> None:
    _log_context.set({})
