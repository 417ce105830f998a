"""SQLAlchemy ORM models for the organization store."""

import uuid
from datetime import datetime

import uuid_utils as uuid7_lib
from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _uuid7() -> str:
    """Generate a UUIDv7 (time-ordered) string for use as default PK value."""
    return str(uuid.UUID(bytes=uuid7_lib.uuid7().bytes))


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class Organization(Base):
    """Tenant organization.

    ``slug`` addresses the tenant as ``<slug>.<root-domain>``;
    ``custom_domain`` binds at most one external domain to it.
    """

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_uuid7)
    name: Mapped[str] = mapped_column(Text)
    slug: Mapped[str] = mapped_column(String(63), unique=True, index=True)
    custom_domain: Mapped[str | None] = mapped_column(
        String(253), unique=True, index=True
    )
    logo: Mapped[str | None] = mapped_column(Text)
    metadata_json: Mapped[str | None] = mapped_column("metadata", Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
