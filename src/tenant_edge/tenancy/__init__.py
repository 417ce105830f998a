"""Host-based tenant resolution and request rewriting."""

from tenant_edge.tenancy.context import RequestContext, TenantRoutingConfig
from tenant_edge.tenancy.host import normalize_host
from tenant_edge.tenancy.resolver import TenantResolver
from tenant_edge.tenancy.rewriter import RoutingDecision, RoutingOutcome
from tenant_edge.tenancy.routing import TenantRouter
from tenant_edge.tenancy.schemas import TenantInfo
from tenant_edge.tenancy.slugs import RESERVED_SLUGS, is_slug_valid

__all__ = [
    "RESERVED_SLUGS",
    "RequestContext",
    "RoutingDecision",
    "RoutingOutcome",
    "TenantInfo",
    "TenantResolver",
    "TenantRouter",
    "TenantRoutingConfig",
    "is_slug_valid",
    "normalize_host",
]
