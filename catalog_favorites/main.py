import logging
import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_favorites import __version__
from catalog_favorites.cache import CounterStore
from catalog_favorites.db.connection import (
    create_engine,
    create_session_factory,
    create_tables,
    sanitize_database_url,
)
from catalog_favorites.services.auth import TokenService
from catalog_favorites.services.catalog_client import CatalogClient, CatalogFetchError
from catalog_favorites.settings import AppSettings, get_settings
from catalog_favorites.utils.error_responses import error_json_response
from catalog_favorites.utils.rate_limit import RateLimiter
from catalog_favorites.utils.request_context import get_request_id, set_request_id

from .api import auth, favorites, products, profile

logger = logging.getLogger(__name__)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}

RATE_LIMIT_EXEMPT_PATHS = frozenset({"/health"})


def configure_logging(settings: AppSettings) -> None:
    logging.basicConfig(
        level=settings.log_level_numeric,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _validate_environment(settings: AppSettings) -> None:
    """Fail on missing required settings and log warnings for optional ones."""

    settings.require_jwt_secret()

    warnings = settings.optional_config_warnings()
    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning(f"  • {warning}")
        logger.warning("=" * 60)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    settings: AppSettings = app.state.settings
    _validate_environment(settings)

    logger.info("=" * 60)
    logger.info("Catalog Favorites API - Preflight Check")
    logger.info("=" * 60)
    logger.info(f"Database Type: {settings.database_type.upper()}")
    logger.info(f"Database URL: {sanitize_database_url(settings.resolved_database_url)}")
    logger.info(f"Catalog URL: {settings.catalog_api_url}")
    if settings.should_create_tables:
        await create_tables(app.state.engine)
    else:
        logger.info("Schema managed by Alembic migrations (run: alembic upgrade head)")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down Catalog Favorites API")
    await app.state.catalog_client.aclose()
    await app.state.counter_store.close()
    await app.state.engine.dispose()


async def add_request_context(request: Request, call_next):
    """Tag the request with an id and stamp security headers on the response."""
    request_id = str(uuid.uuid4())
    set_request_id(request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


async def enforce_rate_limit(request: Request, call_next):
    """Reject clients that exceed the configured request budget."""
    limiter: RateLimiter | None = request.app.state.rate_limiter
    if limiter is None or request.url.path in RATE_LIMIT_EXEMPT_PATHS:
        return await call_next(request)

    client_id = request.client.host if request.client else "unknown"
    decision = await limiter.hit(client_id)
    if not decision.allowed:
        return error_json_response(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            message="Too many requests from this IP, please try again later",
            headers={"Retry-After": str(decision.retry_after)},
        )

    response = await call_next(request)
    response.headers["X-RateLimit-Limit"] = str(limiter.max_requests)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
    return response


# Exception handlers
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render ``HTTPException`` (including unknown routes) as ``{"error": ...}``."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Route not found"
    return error_json_response(
        status_code=exc.status_code,
        message=message,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors before they reach the services."""
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location)
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(messages),
    )

    return error_json_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message="; ".join(messages) or "Invalid request",
    )


async def catalog_exception_handler(request: Request, exc: CatalogFetchError):
    """Collapse catalog failures into a generic server error."""
    logger.error(
        "Catalog failure for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )
    return error_json_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Failed to fetch products from the catalog",
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle storage errors without leaking driver details."""
    logger.error(
        "Database error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )
    return error_json_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal server error",
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other unhandled exceptions."""
    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        type(exc).__name__,
    )
    return error_json_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal server error",
    )


async def healthcheck() -> dict[str, str]:
    """Simple health endpoint for readiness checks."""
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the ASGI application and the collaborators it shares across requests."""

    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Catalog Favorites API",
        version=__version__,
        description="User accounts and favorite products backed by a remote catalog.",
        lifespan=lifespan,
        redirect_slashes=False,  # Disable automatic trailing slash redirects
    )

    engine = create_engine(settings)
    counter_store = CounterStore(settings.redis_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.catalog_client = CatalogClient.from_settings(settings)
    app.state.token_service = TokenService.from_settings(settings)
    app.state.counter_store = counter_store
    app.state.rate_limiter = (
        RateLimiter(
            counter_store,
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
        if settings.rate_limit_enabled
        else None
    )

    # Middleware added last runs first: request ids wrap the rate limiter so
    # 429 responses carry them too.
    app.middleware("http")(enforce_rate_limit)
    app.middleware("http")(add_request_context)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(CatalogFetchError, catalog_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.add_api_route("/health", healthcheck, methods=["GET"], tags=["system"])

    prefix = settings.normalized_api_prefix
    app.include_router(auth.router, prefix=prefix, tags=["auth"])
    app.include_router(profile.router, prefix=f"{prefix}/profile", tags=["profile"])
    app.include_router(products.router, prefix=f"{prefix}/products", tags=["products"])
    app.include_router(favorites.router, prefix=f"{prefix}/favorites", tags=["favorites"])

    return app

