"""FastAPI application entry point."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from scopedsearch import __version__
from scopedsearch.api.router import api_router
from scopedsearch.config import get_settings
from scopedsearch.domain.resources import build_default_registry
from scopedsearch.infrastructure.database.connection import dispose_engine
from scopedsearch.observability.metrics import setup_metrics
from scopedsearch.shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ScopedSearchError,
    ScopeError,
    StorageError,
    ValidationError,
)
from scopedsearch.shared.logging import (
    REQUEST_ID_HEADER,
    bind_request_context,
    clear_request_context,
    get_logger,
    request_id_from,
    setup_logging,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown events."""
    # Startup
    setup_logging()
    logger.info("scopedsearch_starting", version=__version__)

    settings = get_settings()
    if getattr(app.state, "auth_provider", None) is None:
        from scopedsearch.api.middleware.auth import build_auth_provider

        app.state.auth_provider = build_auth_provider(settings)
    if getattr(app.state, "registry", None) is None:
        app.state.registry = build_default_registry(settings)

    yield

    # Shutdown
    logger.info("scopedsearch_stopping")
    auth_provider = getattr(app.state, "auth_provider", None)
    if auth_provider is not None:
        await auth_provider.close()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Scoped Search API",
        description="Access-scoped, paginated search over tenant data",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # CORS middleware
    if settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "PATCH", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Exception handlers
    register_exception_handlers(app)

    # Per-request logging context
    setup_request_context(app)

    # Include routers
    app.include_router(api_router, prefix="/api/v1")

    # Observability
    setup_metrics(app)

    return app


def setup_request_context(app: FastAPI) -> None:
    """Bind a request id to every log event and echo it on the response."""

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request_id_from(request.headers.get(REQUEST_ID_HEADER))
        bind_request_context(request_id, request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _error_body(error: str, exc: ScopedSearchError) -> dict[str, object]:
    content: dict[str, object] = {"error": error, "message": exc.message}
    if exc.details:
        content["details"] = exc.details
    return content


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        _ = request
        return JSONResponse(status_code=422, content=_error_body("validation_error", exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": "Request validation failed",
                "details": {"errors": jsonable_errors(exc)},
            },
        )

    @app.exception_handler(AuthenticationError)
    async def auth_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=401,
            content={"error": "authentication_error", "message": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(
        request: Request, exc: AuthorizationError
    ) -> JSONResponse:
        _ = request
        return JSONResponse(status_code=403, content=_error_body("forbidden", exc))

    @app.exception_handler(ScopeError)
    async def scope_error_handler(request: Request, exc: ScopeError) -> JSONResponse:
        _ = request
        return JSONResponse(status_code=403, content=_error_body("scope_error", exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        _ = request
        return JSONResponse(status_code=404, content=_error_body("not_found", exc))

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=503,
            content={
                "error": "storage_unavailable",
                "message": "Search is temporarily unavailable",
            },
        )

    @app.exception_handler(ScopedSearchError)
    async def scopedsearch_error_handler(
        request: Request, exc: ScopedSearchError
    ) -> JSONResponse:
        _ = request
        logger.error("unhandled_error", error=exc.message, details=exc.details)
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "message": "An internal error occurred"},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        _ = request
        logger.exception("unexpected_error", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "message": "An unexpected error occurred"},
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Strip non-serializable context from pydantic error entries."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


# Create app instance
app = create_app()
