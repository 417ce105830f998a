"""Per-request tenant routing context and immutable routing config."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from tenant_edge.tenancy.schemas import TenantInfo

DEFAULT_TIMEOUT_MS = 5000


@dataclass(frozen=True)
class TenantRoutingConfig:
    """Static configuration for tenant routing, built once at startup.

    Attributes:
        root_domain: Deployment root domain; requests to it skip resolution.
        base_url: Base URL of the internal tenant resolution endpoint.
        internal_api_secret: Shared secret for the internal call. ``None``
            activates the deprecated ``x-internal-call`` fallback header.
        timeout_ms: Deadline for one resolution call, in milliseconds.
    """

    root_domain: str
    base_url: str
    internal_api_secret: str | None = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class RequestContext:
    """State of one request while it moves through the routing stages.

    Never shared between requests; discarded once a decision is emitted.
    """

    host: str | None = None
    tenant: TenantInfo | None = None
    headers: dict[str, str] = field(default_factory=dict)
    started_at: float = field(default_factory=time.perf_counter)
    started_at_ms: int = field(default_factory=_now_ms)

    @property
    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)
