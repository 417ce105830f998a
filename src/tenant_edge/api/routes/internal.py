"""Internal service-to-service endpoint for tenant resolution.

Called only by the tenant routing middleware. Protected by the shared
``x-internal-secret`` header, or by the deprecated ``x-internal-call``
marker when no secret is configured.
"""

from __future__ import annotations

import secrets
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_edge.api.deps import get_session
from tenant_edge.api.schemas import ErrorResponse
from tenant_edge.config import Settings, get_settings
from tenant_edge.storage.organization_repository import OrganizationRepository
from tenant_edge.tenancy.resolver import LEGACY_CALL_VALUE
from tenant_edge.tenancy.schemas import TenantInfo

logger = structlog.get_logger()

router = APIRouter(tags=["internal"], include_in_schema=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def _is_authorized(
    settings: Settings,
    internal_secret: str | None,
    internal_call: str | None,
) -> bool:
    expected = settings.internal_secret()
    if expected is not None:
        return internal_secret is not None and secrets.compare_digest(
            internal_secret.encode(), expected.encode()
        )
    return internal_call == LEGACY_CALL_VALUE


def _error(message: str, status_code: int) -> JSONResponse:
    body = ErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.api_route("/internal/tenant/resolve", methods=["GET", "HEAD"])
async def resolve_tenant(
    session: SessionDep,
    settings: SettingsDep,
    slug: Annotated[str | None, Query()] = None,
    hostname: Annotated[str | None, Query()] = None,
    x_internal_secret: Annotated[str | None, Header()] = None,
    x_internal_call: Annotated[str | None, Header()] = None,
) -> JSONResponse:
    """Look up a tenant by slug or custom domain (logical OR)."""
    if not _is_authorized(settings, x_internal_secret, x_internal_call):
        logger.warning("internal_resolve_unauthorized")
        return _error("Unauthorized", 401)

    if not slug and not hostname:
        return _error("Missing slug or hostname parameter", 400)

    repo = OrganizationRepository(session)
    try:
        organization = await repo.find_for_resolution(slug=slug, hostname=hostname)
    except SQLAlchemyError as e:
        logger.error("internal_resolve_db_error", error_type=type(e).__name__)
        return _error("Internal server error", 500)

    if organization is None:
        return _error("Tenant not found", 404)

    tenant = TenantInfo(
        id=organization.id,
        slug=organization.slug,
        custom_domain=organization.custom_domain,
    )
    return JSONResponse(content=tenant.model_dump(by_alias=True))
