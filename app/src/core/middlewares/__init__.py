from .request_context import RequestContextMiddleware  # noqa: F401

__all__ = ["RequestContextMiddleware"]
