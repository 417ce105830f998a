"""Shared fixtures for integration tests requiring live infrastructure."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

from tenant_edge.config import get_settings
from tenant_edge.storage.orm import Base, Organization

# ── Engine ─────────────────────────────────────────────────────────


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an async engine from settings."""
    engine = create_async_engine(
        get_settings().database_url,
        pool_size=5,
        max_overflow=0,
    )
    yield engine
    await engine.dispose()


# ── Session with rollback ──────────────────────────────────────────


@pytest.fixture()
async def db_session(
    async_engine: AsyncEngine,
) -> AsyncGenerator[AsyncSession]:
    """Provide a session wrapped in a transaction, rolled back after test.

    Tables are created inside the same transaction, so nothing persists.
    """
    async with async_engine.connect() as conn:
        trans = await conn.begin()
        await conn.run_sync(Base.metadata.create_all)
        session = AsyncSession(bind=conn, expire_on_commit=False)

        yield session

        await session.close()
        await trans.rollback()


@pytest.fixture()
async def seed_organization(db_session: AsyncSession) -> Organization:
    """Create an organization with a custom domain."""
    suffix = uuid.uuid4().hex[:8]
    organization = Organization(
        name="Integration Org",
        slug=f"org-{suffix}",
        custom_domain=f"{suffix}.example.org",
    )
    db_session.add(organization)
    await db_session.flush()
    return organization
