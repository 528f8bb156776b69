import logging
from typing import Any, Dict, Optional

from src.core.logging.filters import get_log_context

logger = logging.getLogger(__name__)


def log_exception_with_context(
    exc: Exception,
    message: str = "Exception occurred",
    level: int = logging.ERROR,
    extra_context: Optional[Dict[str, Any]] = None,
    target: Optional[logging.Logger] = None,
) -> None:
    """
    Log an exception with current context and additional information.

    Used where a failure is deliberately not surfaced to the caller (for
    example a best-effort public location removal) so it still leaves a
    structured trace.

    Args:
        exc: The exception to log
        message: Custom message to include with the log
        level: Logging level to use
        extra_context: Additional context to include in the log
        target: Logger to emit on, defaults to this module's logger
    """
    context = get_log_context()

    log_extra = {
        "event_type": "exception_logged",
        "exception_type": type(exc).__name__,
        "exception_message": str(exc),
        **context,
    }

    if extra_context:
        log_extra.update(extra_context)

    (target or logger).log(
        level,
        "%s: %s - %s",
        message,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
        extra=log_extra,
    )
