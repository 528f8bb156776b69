from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
from fastapi_problem.handler import add_exception_handler
from src.core.config import settings
from src.core.exceptions.handler import eh
from src.core.logging import get_logger, get_logging_config, setup_exception_logging, setup_logging
from src.core.middlewares import RequestContextMiddleware
from src.domain.repositories import AccountRepository
from src.domain.routers import account_router, health_router, map_router
from src.libs.document_store import DocumentStoreFactory, DocumentStoreProvider

if settings.ENVIRONMENT in ["staging", "production"]:
    setup_logging(config_override=get_logging_config())
    setup_exception_logging()


logger = get_logger(__name__)


def build_lifespan(
    document_store: DocumentStoreProvider | None = None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """
    Build the application lifespan.

    The document store (the configured one unless given) and the account
    repository shared by every request are created on startup and stored on
    `app.state`; the store is closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Application startup initiated", extra={"event_type": "app_startup_start"})

        store = document_store or DocumentStoreFactory.get_configured_provider()
        app.state.document_store = store
        app.state.account_repository = AccountRepository(store)

        if not await store.health_check():
            logger.warning("Document store is not reachable", extra={"event_type": "document_store_unhealthy"})

        logger.info(
            "Application startup completed successfully",
            extra={
                "event_type": "app_startup_complete",
                "environment": settings.ENVIRONMENT,
                "app_version": settings.APP_VERSION,
                "document_store": settings.DOCUMENT_STORE_BACKEND,
            },
        )

        try:
            yield
        finally:
            try:
                await store.close()
                logger.info("Document store closed", extra={"event_type": "app_shutdown_complete"})
            except Exception as exc:
                logger.error(
                    "Error while closing the document store",
                    exc_info=True,
                    extra={"event_type": "app_shutdown_error", "exception_type": type(exc).__name__},
                )

    return lifespan


def create_app(document_store: DocumentStoreProvider | None = None) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        lifespan=build_lifespan(document_store),
        docs_url=settings.OPENAPI_DOCS_URL,
        openapi_url=settings.OPENAPI_JSON_SCHEMA_URL,
        redoc_url=None,
    )

    add_exception_handler(app, eh)

    # Middlewares
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if settings.ENVIRONMENT in ["production"]:
        app.add_middleware(HTTPSRedirectMiddleware)

    app.add_middleware(GZipMiddleware, compresslevel=5)
    app.add_middleware(RequestContextMiddleware)

    # Routers (V1)
    app.include_router(account_router, prefix=f"{settings.API_V1_STR}/accounts", tags=["Accounts"])
    app.include_router(map_router, prefix=f"{settings.API_V1_STR}/map", tags=["Map"])
    app.include_router(health_router, prefix="/health", include_in_schema=False)

    return app


app = create_app()
