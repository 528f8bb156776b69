import traceback
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

DEFAULT_RENAME_FIELDS = {
    "levelname": "level",
    "asctime": "timestamp",
    "name": "logger",
}


class StructuredExceptionJsonFormatter(JsonFormatter):
    """
    JSON formatter that turns `exc_info` into a structured `exception`
    object (type, message, traceback lines) instead of a flat text blob.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        # dictConfig passes the format string as `format`
        if "format" in kwargs:
            kwargs["fmt"] = kwargs.pop("format")

        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        super().__init__(*args, **kwargs)

    def add_fields(self, log_record: Dict[str, Any], record: Any, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if record.exc_info:
            exc_type, exc_value, exc_traceback = record.exc_info

            exception_data = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": None,
            }

            if exc_traceback:
                exception_data["traceback"] = traceback.format_exception(exc_type, exc_value, exc_traceback)

            log_record["exception"] = exception_data

            log_record.pop("exc_info", None)
            log_record.pop("exc_text", None)


class ConsoleFormatter(JsonFormatter):
    """Compact JSON output for local development, without exception structuring."""

    def __init__(self, **kwargs: Any) -> None:
        fmt = kwargs.pop("format", "%(asctime)s %(name)s %(levelname)s %(message)s")
        datefmt = kwargs.pop("datefmt", "%Y-%m-%d %H:%M:%S")
        rename_fields = {**DEFAULT_RENAME_FIELDS, **kwargs.pop("rename_fields", {})}

        super().__init__(fmt=fmt, datefmt=datefmt, rename_fields=rename_fields, **kwargs)


class ProductionFormatter(StructuredExceptionJsonFormatter):
    """Formatter carrying every location and process field for production."""

    def __init__(self, **kwargs: Any) -> None:
        fmt = kwargs.pop("format", None) or (
            "%(asctime)s %(name)s %(levelname)s %(message)s "
            "%(pathname)s %(lineno)d %(funcName)s %(process)d %(thread)d"
        )
        datefmt = kwargs.pop("datefmt", "%Y-%m-%dT%H:%M:%S")

        rename_fields = {
            **DEFAULT_RENAME_FIELDS,
            "pathname": "file_path",
            "lineno": "line_number",
            "funcName": "function_name",
            "process": "process_id",
            "thread": "thread_id",
            **kwargs.pop("rename_fields", {}),
        }

        super().__init__(fmt=fmt, datefmt=datefmt, rename_fields=rename_fields, **kwargs)
