"""Read access to the organization store."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_edge.errors import OrganizationNotFoundError
from tenant_edge.storage.orm import Organization


class OrganizationRepository:
    """Lookups used by tenant resolution and the domain API."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_for_resolution(
        self,
        *,
        slug: str | None = None,
        hostname: str | None = None,
    ) -> Organization | None:
        """Find the organization matching ``slug`` OR ``custom_domain``.

        Returns None when neither identifier is given or nothing matches.
        """
        conditions = []
        if slug:
            conditions.append(Organization.slug == slug)
        if hostname:
            conditions.append(Organization.custom_domain == hostname)
        if not conditions:
            return None

        stmt = select(Organization).where(or_(*conditions)).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_custom_domain(self, domain: str) -> Organization:
        """Return the organization bound to *domain*.

        Raises:
            OrganizationNotFoundError: no organization owns the domain.
        """
        stmt = select(Organization).where(Organization.custom_domain == domain)
        result = await self._session.execute(stmt)
        organization = result.scalar_one_or_none()
        if organization is None:
            raise OrganizationNotFoundError(domain)
        return organization
