"""FastAPI application with lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tenant_edge.api.middleware import RequestLoggingMiddleware, TenantRoutingMiddleware
from tenant_edge.api.routes.domains import router as domains_router
from tenant_edge.api.routes.health import router as health_router
from tenant_edge.api.routes.internal import router as internal_router
from tenant_edge.api.routes.sites import router as sites_router
from tenant_edge.config import settings
from tenant_edge.logging_config import configure_logging
from tenant_edge.storage.database import engine
from tenant_edge.tenancy.resolver import TenantResolver
from tenant_edge.tenancy.routing import TenantRouter

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown.

    Startup:
        - Configure logging.
        - Create the shared HTTP client and the tenant router.
    Shutdown:
        - Close the HTTP client.
        - Dispose database engine (close connection pool).
    """
    routing_config = settings.tenant_routing()
    configure_logging(
        environment=str(settings.environment),
        log_level=settings.log_level,
        secrets=[routing_config.internal_api_secret],
    )

    timeout = httpx.Timeout(routing_config.timeout_seconds)
    async with httpx.AsyncClient(timeout=timeout) as http_client:
        app.state.http_client = http_client
        resolver = TenantResolver(routing_config, http_client)
        app.state.tenant_router = TenantRouter(routing_config, resolver)

        logger.info(
            "app_started",
            environment=str(settings.environment),
            root_domain=routing_config.root_domain,
        )
        yield

    await engine.dispose()
    logger.info("app_stopped")


app = FastAPI(
    title="Tenant Edge",
    description="Host-based tenant resolution and request routing",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.is_dev,
)

app.add_middleware(TenantRoutingMiddleware)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Catch-all handler for unhandled exceptions."""
    logger.error("unhandled_exception", exc_info=exc, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.include_router(health_router)
app.include_router(internal_router, prefix="/api")
app.include_router(domains_router, prefix="/api/v1")
app.include_router(sites_router)
