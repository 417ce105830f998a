"""Tenant resolution over the internal lookup endpoint.

Maps a validated hostname to a ``TenantInfo`` either by subdomain slug
(``<slug>.<root-domain>``) or by custom domain. Every failure path returns
``None`` and leaves a log entry; nothing is cached, so transient failures
are retried by the next request.
"""

from __future__ import annotations

import asyncio
import warnings
from typing import TYPE_CHECKING

import httpx
import structlog
from pydantic import ValidationError

from tenant_edge.tenancy.schemas import TenantInfo
from tenant_edge.tenancy.slugs import is_slug_valid

if TYPE_CHECKING:
    from tenant_edge.tenancy.context import TenantRoutingConfig

logger = structlog.get_logger()

RESOLVE_PATH = "/api/internal/tenant/resolve"
SECRET_HEADER = "x-internal-secret"
LEGACY_CALL_HEADER = "x-internal-call"
LEGACY_CALL_VALUE = "tenant-resolver"


class TenantResolver:
    """Resolve hostnames to tenants with a bounded-latency lookup.

    The ``httpx.AsyncClient`` is injected and shared across requests; the
    resolver itself holds only immutable configuration.
    """

    def __init__(self, config: TenantRoutingConfig, client: httpx.AsyncClient) -> None:
        self._config = config
        self._client = client
        self._url = f"{config.base_url.rstrip('/')}{RESOLVE_PATH}"
        self._auth_headers = self._build_auth_headers(config)

    @property
    def auth_headers(self) -> dict[str, str]:
        """Headers authenticating the resolver to the internal endpoint."""
        return dict(self._auth_headers)

    @staticmethod
    def _build_auth_headers(config: TenantRoutingConfig) -> dict[str, str]:
        if config.internal_api_secret:
            return {SECRET_HEADER: config.internal_api_secret}

        # Legacy mode: a static marker anyone can forge.
        warnings.warn(
            "INTERNAL_API_SECRET is not set; tenant resolution falls back to the "
            "deprecated x-internal-call header",
            DeprecationWarning,
            stacklevel=3,
        )
        logger.warning(
            "internal_auth_fallback_deprecated",
            header=LEGACY_CALL_HEADER,
        )
        return {LEGACY_CALL_HEADER: LEGACY_CALL_VALUE}

    def extract_slug(self, hostname: str) -> str | None:
        """Return the subdomain prefix when *hostname* is under the root domain."""
        suffix = f".{self._config.root_domain}"
        if hostname.endswith(suffix):
            return hostname[: -len(suffix)]
        return None

    async def resolve(self, hostname: str) -> TenantInfo | None:
        """Resolve a normalized hostname to a tenant, or ``None``."""
        if hostname == self._config.root_domain:
            return None

        params: dict[str, str] = {}
        slug = self.extract_slug(hostname)
        if slug is not None:
            if not is_slug_valid(slug):
                logger.warning("tenant_slug_invalid", slug=slug[:64], hostname=hostname)
                return None
            params["slug"] = slug
        params["hostname"] = hostname

        try:
            response = await asyncio.wait_for(
                self._client.get(
                    self._url,
                    params=params,
                    headers=self._auth_headers,
                ),
                timeout=self._config.timeout_seconds,
            )
        except (TimeoutError, httpx.TimeoutException):
            logger.error(
                "tenant_resolution_timeout",
                hostname=hostname,
                timeout_ms=self._config.timeout_ms,
            )
            return None
        except httpx.HTTPError as e:
            logger.error(
                "tenant_resolution_error",
                hostname=hostname,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug("tenant_not_found", hostname=hostname)
            return None
        if response.status_code != httpx.codes.OK:
            logger.error(
                "tenant_resolution_failed",
                hostname=hostname,
                status_code=response.status_code,
            )
            return None

        return self._parse(response, hostname)

    @staticmethod
    def _parse(response: httpx.Response, hostname: str) -> TenantInfo | None:
        try:
            tenant = TenantInfo.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(
                "tenant_payload_invalid",
                hostname=hostname,
                error_type=type(e).__name__,
            )
            return None

        # The store should never hold an invalid slug; treat it as absent.
        if not is_slug_valid(tenant.slug):
            logger.error(
                "tenant_slug_invalid_from_store",
                hostname=hostname,
                tenant_id=tenant.id,
                slug=tenant.slug[:64],
            )
            return None

        return tenant
