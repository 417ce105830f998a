"""Routing decisions for a request once its tenant is known."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum

from tenant_edge.tenancy.schemas import TenantInfo

TENANT_PATH_PREFIX = "/s"
PASS_THROUGH_PREFIXES: tuple[str, ...] = ("/api", "/healthz")

HEADER_TENANT_ID = "x-tenant-id"
HEADER_TENANT_SLUG = "x-tenant-slug"
HEADER_TENANT_DOMAIN = "x-tenant-domain"
HEADER_TENANT_TIMESTAMP = "x-tenant-timestamp"
HEADER_MIDDLEWARE_START = "x-middleware-start"

TENANT_HEADERS: tuple[str, ...] = (
    HEADER_TENANT_ID,
    HEADER_TENANT_SLUG,
    HEADER_TENANT_DOMAIN,
    HEADER_TENANT_TIMESTAMP,
    HEADER_MIDDLEWARE_START,
)


class RoutingOutcome(StrEnum):
    REJECTED = "rejected"
    PASS_THROUGH = "pass_through"
    PASS_THROUGH_WITH_HEADERS = "pass_through_with_headers"
    REWRITTEN = "rewritten"


@dataclass(frozen=True)
class RoutingDecision:
    """Terminal result of tenant routing for one request.

    ``status_code`` and ``body`` are set only for ``REJECTED``; ``path`` and
    ``query`` describe the request forwarded downstream otherwise.
    """

    outcome: RoutingOutcome
    path: str = ""
    query: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    status_code: int | None = None
    body: str = ""
    tenant: TenantInfo | None = None

    @property
    def is_terminal(self) -> bool:
        return self.outcome == RoutingOutcome.REJECTED


def bad_request() -> RoutingDecision:
    return RoutingDecision(
        outcome=RoutingOutcome.REJECTED, status_code=400, body="Bad Request"
    )


def not_found() -> RoutingDecision:
    # Same body for unknown, invalid and unreachable tenants.
    return RoutingDecision(
        outcome=RoutingOutcome.REJECTED, status_code=404, body="Not Found"
    )


def pass_through(path: str, query: str = "") -> RoutingDecision:
    return RoutingDecision(outcome=RoutingOutcome.PASS_THROUGH, path=path, query=query)


def tenant_prefix(slug: str) -> str:
    return f"{TENANT_PATH_PREFIX}/{slug}"


def is_tenant_scoped(path: str, slug: str) -> bool:
    """True if *path* is already under the tenant prefix or an allowed prefix."""
    return path.startswith(tenant_prefix(slug)) or path.startswith(
        PASS_THROUGH_PREFIXES
    )


def build_tenant_headers(
    tenant: TenantInfo,
    host: str,
    started_at_ms: int,
    resolved_at_ms: int | None = None,
) -> dict[str, str]:
    """Headers that carry the resolved tenant identity downstream."""
    if resolved_at_ms is None:
        resolved_at_ms = int(time.time() * 1000)
    return {
        HEADER_TENANT_ID: tenant.id,
        HEADER_TENANT_SLUG: tenant.slug,
        HEADER_TENANT_DOMAIN: tenant.custom_domain or host,
        HEADER_TENANT_TIMESTAMP: str(resolved_at_ms),
        HEADER_MIDDLEWARE_START: str(started_at_ms),
    }


def decide(
    tenant: TenantInfo,
    path: str,
    query: str,
    headers: dict[str, str],
) -> RoutingDecision:
    """Pass tenant-scoped paths through, rewrite everything else under ``/s/<slug>``."""
    if is_tenant_scoped(path, tenant.slug):
        return RoutingDecision(
            outcome=RoutingOutcome.PASS_THROUGH_WITH_HEADERS,
            path=path,
            query=query,
            headers=headers,
            tenant=tenant,
        )

    return RoutingDecision(
        outcome=RoutingOutcome.REWRITTEN,
        path=f"{tenant_prefix(tenant.slug)}{path}",
        query=query,
        headers=headers,
        tenant=tenant,
    )
