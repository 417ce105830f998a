"""Wire models for tenant resolution payloads."""

from pydantic import BaseModel, ConfigDict, Field


class TenantInfo(BaseModel):
    """Tenant identity returned by the internal resolution endpoint.

    Serialized with camelCase ``customDomain`` to match the endpoint contract.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    slug: str
    custom_domain: str | None = Field(default=None, alias="customDomain")
