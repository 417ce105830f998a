"""Tenant-scoped site routes: the target of rewritten requests."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from tenant_edge.api.deps import TenantHeaders, get_tenant_headers
from tenant_edge.api.schemas import TenantSiteResponse

router = APIRouter(tags=["sites"])

TenantDep = Annotated[TenantHeaders, Depends(get_tenant_headers)]


def _site(tenant: TenantHeaders, slug: str, path: str) -> TenantSiteResponse:
    # A request for another tenant's prefix must not be served here.
    if tenant.slug != slug:
        raise HTTPException(status_code=404, detail="Not Found")
    return TenantSiteResponse(
        tenant_id=tenant.tenant_id,
        slug=tenant.slug,
        domain=tenant.domain,
        path=f"/{path}",
    )


@router.get("/s/{slug}")
async def site_index(slug: str, tenant: TenantDep) -> TenantSiteResponse:
    return _site(tenant, slug, "")


@router.get("/s/{slug}/{path:path}")
async def site_page(slug: str, path: str, tenant: TenantDep) -> TenantSiteResponse:
    return _site(tenant, slug, path)
