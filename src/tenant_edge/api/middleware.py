"""HTTP middleware: tenant routing and request/response logging."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog
from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Scope

from tenant_edge.tenancy.matcher import should_bypass
from tenant_edge.tenancy.rewriter import (
    TENANT_HEADERS,
    RoutingOutcome,
    not_found,
    tenant_prefix,
)

if TYPE_CHECKING:
    from tenant_edge.tenancy.rewriter import RoutingDecision
    from tenant_edge.tenancy.routing import TenantRouter

logger = structlog.get_logger()


class TenantRoutingMiddleware(BaseHTTPMiddleware):
    """Map the Host header to a tenant and rewrite the request path.

    The router is injected directly or, when omitted, taken from
    ``app.state.tenant_router`` (set during lifespan startup).
    """

    def __init__(self, app: ASGIApp, router: TenantRouter | None = None) -> None:
        super().__init__(app)
        self._router = router

    def _get_router(self, request: Request) -> TenantRouter:
        if self._router is not None:
            return self._router
        router: TenantRouter = request.app.state.tenant_router
        return router

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Route the request or answer it with a generic 400/404."""
        path = request.url.path
        if should_bypass(path):
            _strip_tenant_headers(request.scope)
            return await call_next(request)

        try:
            decision = await self._get_router(request).route(
                request.headers.get("host"),
                path,
                request.url.query,
            )
        except Exception:
            logger.exception("tenant_routing_error", path=path)
            decision = not_found()

        if decision.is_terminal:
            return PlainTextResponse(
                decision.body, status_code=decision.status_code or 404
            )

        if decision.outcome == RoutingOutcome.PASS_THROUGH:
            _strip_tenant_headers(request.scope)
        else:
            self._apply(request, decision)
        return await call_next(request)

    @staticmethod
    def _apply(request: Request, decision: RoutingDecision) -> None:
        """Write the decision into the ASGI scope seen by downstream handlers."""
        scope = request.scope
        tenant = decision.tenant
        if decision.outcome == RoutingOutcome.REWRITTEN and tenant is not None:
            raw_path = scope.get("raw_path") or scope["path"].encode()
            raw_path = raw_path.split(b"?", 1)[0]
            scope["path"] = decision.path
            scope["raw_path"] = tenant_prefix(tenant.slug).encode() + raw_path

        headers = MutableHeaders(scope=scope)
        for name, value in decision.headers.items():
            headers[name] = value

        request.state.tenant = tenant
        if tenant is not None:
            structlog.contextvars.bind_contextvars(
                tenant_id=tenant.id, tenant_slug=tenant.slug
            )


def _strip_tenant_headers(scope: Scope) -> None:
    """Drop client-supplied tenant headers from requests that carry no tenant."""
    headers = MutableHeaders(scope=scope)
    for name in TENANT_HEADERS:
        if name in headers:
            del headers[name]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log HTTP requests with method, path, status code, and latency."""

    SKIP_PATHS: frozenset[str] = frozenset(
        {"/healthz", "/docs", "/openapi.json", "/redoc"}
    )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request and log timing information."""
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            method=request.method, path=request.url.path
        )

        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = int((time.perf_counter() - start) * 1000)

        tenant = getattr(request.state, "tenant", None)
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            latency_ms=latency_ms,
            tenant_slug=tenant.slug if tenant is not None else None,
        )
        return response
