"""Request/response schemas for the API layer."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class OrganizationResponse(BaseModel):
    """Response for ``GET /domains/organization``."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    slug: str
    custom_domain: str | None = Field(serialization_alias="customDomain")
    logo: str | None = None
    created_at: datetime = Field(serialization_alias="createdAt")


class TenantSiteResponse(BaseModel):
    """Response for the tenant-scoped site route ``/s/{slug}/...``."""

    tenant_id: str
    slug: str
    domain: str
    path: str


class ErrorResponse(BaseModel):
    """Error body for internal endpoints."""

    error: str
