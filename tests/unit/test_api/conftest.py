"""Fixtures for tests that go through the full FastAPI app."""

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest

from tenant_edge.api.app import app
from tenant_edge.tenancy.context import TenantRoutingConfig
from tenant_edge.tenancy.resolver import TenantResolver
from tenant_edge.tenancy.routing import TenantRouter

ROOT_CONFIG = TenantRoutingConfig(
    root_domain="localhost",
    base_url="http://localhost",
    internal_api_secret="test-secret",
)


@pytest.fixture(autouse=True)
def root_router() -> Generator[MagicMock]:
    """Install a tenant router whose root domain is ``localhost``.

    Requests sent to ``http://localhost`` pass straight through, so API
    tests exercise the routes without tenant resolution.
    """
    resolver = MagicMock(spec=TenantResolver)
    resolver.resolve = AsyncMock(return_value=None)
    app.state.tenant_router = TenantRouter(ROOT_CONFIG, resolver)
    yield resolver
    del app.state.tenant_router


@pytest.fixture()
def mock_session() -> AsyncMock:
    session = AsyncMock()
    session.add = MagicMock()
    return session
