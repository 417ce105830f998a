"""FastAPI dependency injection."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Request

from tenant_edge.storage.database import get_session
from tenant_edge.tenancy.rewriter import HEADER_MIDDLEWARE_START, HEADER_TENANT_DOMAIN
from tenant_edge.tenancy.schemas import TenantInfo

__all__ = ["TenantHeaders", "get_session", "get_tenant_headers"]


@dataclass(frozen=True)
class TenantHeaders:
    """Tenant identity as injected into the request by the routing middleware."""

    tenant_id: str
    slug: str
    domain: str
    middleware_start_ms: int | None = None


async def get_tenant_headers(request: Request) -> TenantHeaders:
    """Tenant identity set by the routing middleware for this request.

    Identity comes from ``request.state.tenant``, which only the middleware
    writes; the ``x-tenant-*`` headers it injected supply the domain and
    start time.

    Raises:
        HTTPException 404: the request was not routed through a tenant.
    """
    tenant: TenantInfo | None = getattr(request.state, "tenant", None)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Not Found")

    start = request.headers.get(HEADER_MIDDLEWARE_START)
    return TenantHeaders(
        tenant_id=tenant.id,
        slug=tenant.slug,
        domain=request.headers.get(HEADER_TENANT_DOMAIN, tenant.custom_domain or ""),
        middleware_start_ms=int(start) if start and start.isdigit() else None,
    )
