"""Centralized application configuration via environment variables."""

from enum import StrEnum
from functools import lru_cache
from urllib.parse import urlsplit

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tenant_edge.tenancy.context import TenantRoutingConfig


class Environment(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The internal API secret uses SecretStr to prevent accidental logging.
    Variable names match the deployment environment (``PORT``,
    ``NEXT_PUBLIC_BASE_URL``, ``INTERNAL_API_SECRET``, ``FETCH_TIMEOUT``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- App ---
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    port: int = Field(default=3000, ge=1, le=65535)
    next_public_base_url: str | None = None

    # --- Tenant resolution ---
    internal_api_secret: SecretStr | None = None
    # Milliseconds, matching the FETCH_TIMEOUT convention of the deployment.
    fetch_timeout: int = Field(default=5000, gt=0)

    # --- PostgreSQL ---
    postgres_user: str = "tenant_edge"
    postgres_password: SecretStr = SecretStr("secret")
    postgres_db: str = "tenant_edge"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Assemble database URL from components (psycopg v3 driver)."""
        password = self.postgres_password.get_secret_value()
        return (
            f"postgresql+psycopg://{self.postgres_user}:{password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def base_url(self) -> str:
        """Public base URL; falls back to localhost on the configured port."""
        if self.next_public_base_url:
            return self.next_public_base_url.rstrip("/")
        return f"http://localhost:{self.port}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def root_domain(self) -> str:
        """Host portion of the base URL, lowercased and without port."""
        base = self.base_url
        if "://" not in base:
            base = f"http://{base}"
        return (urlsplit(base).hostname or "localhost").lower()

    # --- Convenience properties ---
    @property
    def is_dev(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    def internal_secret(self) -> str | None:
        """Shared secret for internal calls; an empty value counts as unset."""
        if self.internal_api_secret is None:
            return None
        return self.internal_api_secret.get_secret_value() or None

    def tenant_routing(self) -> TenantRoutingConfig:
        """Build the immutable config consumed by the tenant routing core."""
        return TenantRoutingConfig(
            root_domain=self.root_domain,
            base_url=self.base_url,
            internal_api_secret=self.internal_secret(),
            timeout_ms=self.fetch_timeout,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton.

    Usage::

        from tenant_edge.config import get_settings
        settings = get_settings()

    Or for dependency injection in FastAPI::

        @app.get("/")
        def root(settings: Settings = Depends(get_settings)):
            ...
    """
    return Settings()


settings = get_settings()
