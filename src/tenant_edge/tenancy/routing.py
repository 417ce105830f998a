"""Tenant routing pipeline: validate host, resolve tenant, rewrite request."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from tenant_edge.tenancy import rewriter
from tenant_edge.tenancy.context import RequestContext
from tenant_edge.tenancy.host import normalize_host

if TYPE_CHECKING:
    from tenant_edge.tenancy.context import TenantRoutingConfig
    from tenant_edge.tenancy.resolver import TenantResolver

logger = structlog.get_logger()

SLOW_ROUTING_THRESHOLD_MS = 100


class TenantRouter:
    """Run the three routing stages in order for a single request.

    Holds only immutable collaborators, so one instance serves all
    concurrent requests.
    """

    def __init__(self, config: TenantRoutingConfig, resolver: TenantResolver) -> None:
        self._config = config
        self._resolver = resolver

    @property
    def config(self) -> TenantRoutingConfig:
        return self._config

    async def route(
        self,
        host_header: str | None,
        path: str,
        query: str = "",
        context: RequestContext | None = None,
    ) -> rewriter.RoutingDecision:
        """Return the routing decision for a request."""
        ctx = context or RequestContext()

        ctx.host = normalize_host(host_header)
        if ctx.host is None:
            return rewriter.bad_request()

        if ctx.host == self._config.root_domain:
            return rewriter.pass_through(path, query)

        ctx.tenant = await self._resolver.resolve(ctx.host)
        if ctx.tenant is None:
            decision = rewriter.not_found()
        else:
            ctx.headers = rewriter.build_tenant_headers(
                ctx.tenant, ctx.host, ctx.started_at_ms
            )
            decision = rewriter.decide(ctx.tenant, path, query, ctx.headers)

        duration_ms = ctx.elapsed_ms
        if duration_ms > SLOW_ROUTING_THRESHOLD_MS:
            logger.warning(
                "tenant_routing_slow",
                duration_ms=duration_ms,
                host=ctx.host,
                outcome=str(decision.outcome),
            )
        return decision
