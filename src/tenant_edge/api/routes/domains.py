"""Custom-domain lookup endpoints."""

from __future__ import annotations

from typing import Annotated
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_edge.api.deps import get_session
from tenant_edge.api.schemas import OrganizationResponse
from tenant_edge.errors import OrganizationNotFoundError
from tenant_edge.storage.organization_repository import OrganizationRepository
from tenant_edge.tenancy.host import normalize_host

router = APIRouter(tags=["domains"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def _domain_to_host(domain: str) -> str | None:
    """Accept a bare domain or a URL and return the normalized hostname."""
    if "://" in domain:
        domain = urlsplit(domain).netloc
    return normalize_host(domain)


@router.get("/domains/organization")
async def get_organization_by_domain(
    session: SessionDep,
    domain: Annotated[str, Query(min_length=1, max_length=2048)],
) -> OrganizationResponse:
    """Get the organization bound to a custom domain."""
    host = _domain_to_host(domain)
    if host is None:
        raise HTTPException(status_code=422, detail="Invalid domain")

    repo = OrganizationRepository(session)
    try:
        organization = await repo.get_by_custom_domain(host)
    except OrganizationNotFoundError:
        raise HTTPException(
            status_code=404,
            detail="No organization found for the provided domain.",
        ) from None
    return OrganizationResponse.model_validate(organization)
