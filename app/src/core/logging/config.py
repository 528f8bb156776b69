import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from src.core.config import settings

# Third-party loggers kept quieter than the service's own
LIBRARY_LOG_LEVELS = {
    "fastapi": "INFO",
    "uvicorn": "INFO",
    "uvicorn.access": "WARNING",
    "redis": "WARNING",
}

FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _is_local() -> bool:
    return settings.ENVIRONMENT == "local"


def _app_level() -> str:
    return settings.LOG_LEVEL or ("DEBUG" if _is_local() else "INFO")


def _formatters() -> Dict[str, Any]:
    if not _is_local():
        return {"production": {"()": "src.core.logging.formatters.ProductionFormatter"}}

    return {
        "console": {
            "()": "src.core.logging.formatters.ConsoleFormatter",
            "format": f"{FORMAT} %(request_id)s",
            "datefmt": DATE_FORMAT,
        },
    }


def _filters() -> Dict[str, Any]:
    return {
        "context_filter": {"()": "src.core.logging.filters.CombinedContextFilter"},
        "request_id": {"()": "src.core.logging.filters.RequestIdFilter"},
        "noise_reduction": {
            "()": "src.core.logging.filters.NoiseReductionFilter",
            "suppress_patterns": ["/health"],
        },
    }


def _stream_handler(formatter: str, level: str, filters: List[str], stream: str = "stdout") -> Dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "level": level,
        "formatter": formatter,
        "filters": filters,
        "stream": f"ext://sys.{stream}",
    }


def _handlers() -> Dict[str, Any]:
    if _is_local():
        return {"console": _stream_handler("console", "DEBUG", ["context_filter", "request_id"])}

    # stderr only carries errors so that platforms splitting the streams can alert on it
    return {
        "json_stdout": _stream_handler("production", "INFO", ["context_filter", "noise_reduction"]),
        "error_stderr": _stream_handler("production", "ERROR", ["context_filter"], stream="stderr"),
    }


def get_logging_config() -> Dict[str, Any]:
    """
    Build the `dictConfig` for the current environment.

    Local runs log compact JSON lines, tagged with the request id, to the console. Staging and production
    log one JSON object per line, with errors duplicated on stderr.

    Returns:
        Dictionary containing the complete logging configuration
    """
    handlers = _handlers()
    handler_names = list(handlers)

    loggers: Dict[str, Any] = {
        "src": {"level": _app_level(), "handlers": handler_names, "propagate": False},
    }
    for name, level in LIBRARY_LOG_LEVELS.items():
        loggers[name] = {"level": level, "propagate": name != "uvicorn.access"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": _formatters(),
        "filters": _filters(),
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": "WARNING", "handlers": handler_names},
    }


def load_config_from_yaml(config_path: Path) -> Optional[Dict[str, Any]]:
    """Read a logging configuration file, or None when it is missing or unreadable."""
    if not config_path.exists():
        return None

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"Failed to load logging config from {config_path}: {e}", file=sys.stderr)
        return None


def setup_logging(config_override: Optional[Dict[str, Any]] = None) -> None:
    """
    Configure logging for the process.

    Uses `config_override` when given, otherwise `config/logging.<environment>.yaml`
    under `BASE_DIR`, otherwise `get_logging_config()`.
    """
    config = config_override or load_config_from_yaml(
        Path(settings.BASE_DIR) / "config" / f"logging.{settings.ENVIRONMENT}.yaml"
    )

    try:
        logging.config.dictConfig(config or get_logging_config())
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        print(f"Failed to configure logging: {e}", file=sys.stderr)
        logging.basicConfig(level=logging.INFO, format=FORMAT, handlers=[logging.StreamHandler(sys.stdout)])


def setup_exception_logging() -> None:
    """Log uncaught exceptions at CRITICAL before the default hook runs."""
    previous_hook = sys.excepthook

    def log_uncaught(exc_type, exc_value, exc_traceback):
        if not issubclass(exc_type, KeyboardInterrupt):
            logging.getLogger(__name__).critical(
                "Uncaught exception",
                exc_info=(exc_type, exc_value, exc_traceback),
                extra={"event_type": "uncaught_exception"},
            )
        previous_hook(exc_type, exc_value, exc_traceback)

    sys.excepthook = log_uncaught


def get_logger(name: str) -> logging.Logger:
    """Get a logger, usually for `__name__`."""
    return logging.getLogger(name)
