"""
Structured logging module for the OOTD accounts service.

This module provides:
- Structured JSON logging for production observability
- Contextual enrichment with request IDs, owner IDs, etc.
- Environment-specific configurations

Usage:
    from src.core.logging import setup_logging, get_logger, add_to_log_context

    setup_logging()

    logger = get_logger(__name__)

    with add_to_log_context(owner_id="u1"):
        logger.info("Toggling account privacy")
"""

from .config import get_logger, get_logging_config, setup_exception_logging, setup_logging
from .exceptions import log_exception_with_context
from .filters import add_to_log_context, clear_log_context, get_log_context

__all__ = [
    "setup_logging",
    "setup_exception_logging",
    "get_logger",
    "get_logging_config",
    "add_to_log_context",
    "get_log_context",
    "clear_log_context",
    "log_exception_with_context",
]
