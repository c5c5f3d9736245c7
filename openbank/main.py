"""
Open Banking Mock API

A FastAPI service emulating a financial data aggregator's link flow.

Flow:
-----
1. POST /link/token/create returns a placeholder link token
2. POST /item/public_token/exchange turns a persona name into a signed,
   one-hour access token and a fresh item_id
3. GET /accounts and GET /transactions return that persona's fixture data
   when called with ``Authorization: Bearer <access_token>``

Tokens are self-contained JWTs, so the service keeps no session state. The
persona fixtures are loaded once when the app is built and never change.
"""
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from openbank import metrics
from openbank.api import router
from openbank.config import Settings, settings as default_settings
from openbank.errors import ApiError, AuthenticationError, InternalError
from openbank.fixtures import FixtureStore
from openbank.logging import (
    configure_logging,
    get_logger,
    set_request_context,
    clear_request_context,
    generate_request_id,
)
from openbank.schemas import error_body
from openbank.services.data import DataService
from openbank.services.link import LinkService
from openbank.services.tokens import TokenService

logger = get_logger(__name__)

UNMETERED_PATHS = ("/health", "/metrics")
UNMATCHED_ROUTE = "unmatched"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    app_settings: Settings = app.state.settings
    logger.info(
        "service_started",
        service_name=app_settings.service_name,
        personas=app.state.fixture_store.personas(),
    )

    yield

    logger.info("service_stopping", service_name=app_settings.service_name)


def route_label(request: Request) -> str:
    """Route template the request matched, so metric labels stay bounded."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


async def request_logging_middleware(request: Request, call_next):
    """
    Middleware for request tracing, logging, and metrics.

    Sets up request context with:
    - request_id: Unique identifier for tracing
    - Timing for duration_ms calculation
    - Prometheus metrics collection
    """
    method = request.method
    path = request.url.path

    # Skip logging/metrics for health and metrics endpoints
    if path in UNMETERED_PATHS:
        return await call_next(request)

    request_id = request.headers.get("X-Request-ID") or generate_request_id()
    set_request_context(request_id)
    request.state.request_id = request_id

    start_time = time.perf_counter()

    logger.info("request_received", method=method, path=path)

    try:
        response = await call_next(request)

        duration_seconds = time.perf_counter() - start_time

        logger.info(
            "request_completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=round(duration_seconds * 1000, 2),
        )
        metrics.record_http_request(method, route_label(request), response.status_code, duration_seconds)

        response.headers["X-Request-ID"] = request_id
        return response

    except Exception as e:
        duration_seconds = time.perf_counter() - start_time

        logger.error(
            "request_failed",
            method=method,
            path=path,
            duration_ms=round(duration_seconds * 1000, 2),
            error=str(e),
        )
        metrics.record_http_request(method, route_label(request), 500, duration_seconds)

        raise

    finally:
        clear_request_context()


async def api_error_handler(request: Request, exc: ApiError):
    """Render deliberate API errors as ``{"error": message}``."""
    request_id = getattr(request.state, "request_id", "unknown")
    headers = {"X-Request-ID": request_id}

    if isinstance(exc, AuthenticationError):
        headers["WWW-Authenticate"] = "Bearer"
    if isinstance(exc, InternalError):
        logger.error("internal_error", path=request.url.path, error=exc.message)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message),
        headers=headers,
    )


def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[FixtureStore] = None,
    token_service: Optional[TokenService] = None,
) -> FastAPI:
    """
    Build the application with its fixture store and token service.

    Args:
        app_settings: Settings to use, defaults to environment settings
        store: Pre-built fixture store, defaults to loading settings.fixtures_dir
        token_service: Token service, defaults to one keyed by settings.signing_key

    Returns:
        A ready-to-serve FastAPI application
    """
    app_settings = app_settings or default_settings

    if token_service is None:
        if app_settings.uses_default_signing_key:
            logger.warning(
                "default_signing_key_in_use",
                hint="set SIGNING_KEY to a secret value outside local development",
            )
        token_service = TokenService(
            app_settings.signing_key,
            ttl_seconds=app_settings.token_ttl_seconds,
        )

    # Loaded before the app is returned so no request can see a partial store
    if store is None:
        store = FixtureStore.from_directory(app_settings.resolved_fixtures_dir)

    app = FastAPI(
        title="Open Banking Mock API",
        description="Mock aggregator link flow with persona-scoped accounts and transactions",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.fixture_store = store
    app.state.token_service = token_service
    app.state.link_service = LinkService(
        store,
        token_service,
        link_token=app_settings.link_token,
        link_token_ttl_seconds=app_settings.link_token_ttl_seconds,
    )
    app.state.data_service = DataService(store)

    app.middleware("http")(request_logging_middleware)
    app.add_exception_handler(ApiError, api_error_handler)

    app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for container orchestration."""
        return {
            "status": "ok",
            "service": app_settings.service_name,
            "personas": len(store),
        }

    @app.get("/metrics")
    async def metrics_endpoint():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    return app


configure_logging(default_settings.log_level)
app = create_app()


def run() -> None:
    """Serve the default app with uvicorn on the configured host and port."""
    import uvicorn
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    run()
