"""CLI for organization (tenant) management.

Usage::

    uv run python -m scripts.manage_organization <command> [options]

Commands:
    create-org      Create a new organization
    set-domain      Bind (or clear) a custom domain for an organization
    list-orgs       List all organizations
    check-slug      Check whether a slug is usable as a tenant subdomain
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from tenant_edge.config import settings
from tenant_edge.storage.orm import Organization
from tenant_edge.tenancy.host import normalize_host
from tenant_edge.tenancy.slugs import RESERVED_SLUGS, is_slug_valid


def get_sync_session() -> Session:
    """Create sync session for CLI operations.

    Uses the same database URL as the async app (psycopg v3
    handles both sync and async natively).
    """
    engine = create_engine(settings.database_url)
    return Session(engine)


def _normalize_domain_or_exit(domain: str) -> str:
    host = normalize_host(domain)
    if host is None:
        print(f"Invalid domain: {domain}", file=sys.stderr)
        sys.exit(1)
    return host


def _exit_if_domain_taken(
    session: Session, domain: str, organization_id: str | None = None
) -> None:
    owner = session.execute(
        select(Organization).where(Organization.custom_domain == domain)
    ).scalar_one_or_none()
    if owner is not None and owner.id != organization_id:
        print(
            f"Domain already bound to another organization: {domain}",
            file=sys.stderr,
        )
        sys.exit(1)


def create_org(args: argparse.Namespace) -> None:
    """Create a new organization."""
    if not is_slug_valid(args.slug):
        print(f"Invalid slug: {args.slug}", file=sys.stderr)
        sys.exit(1)

    domain = _normalize_domain_or_exit(args.domain) if args.domain else None

    with get_sync_session() as session:
        existing = session.execute(
            select(Organization).where(Organization.slug == args.slug)
        ).scalar_one_or_none()
        if existing is not None:
            print(f"Organization already exists: {args.slug}", file=sys.stderr)
            sys.exit(1)
        if domain is not None:
            _exit_if_domain_taken(session, domain)

        organization = Organization(
            name=args.name, slug=args.slug, custom_domain=domain
        )
        session.add(organization)
        session.commit()
        print(
            f"Organization created: {args.name} "
            f"(slug: {args.slug}, id: {organization.id})"
        )


def set_domain(args: argparse.Namespace) -> None:
    """Bind a custom domain to an organization, or clear it with --clear."""
    domain = None if args.clear else _normalize_domain_or_exit(args.domain)

    with get_sync_session() as session:
        organization = session.execute(
            select(Organization).where(Organization.slug == args.slug)
        ).scalar_one_or_none()
        if organization is None:
            print(f"Organization not found: {args.slug}", file=sys.stderr)
            sys.exit(1)

        if domain is not None:
            _exit_if_domain_taken(session, domain, organization.id)

        organization.custom_domain = domain
        session.commit()
        if domain is None:
            print(f"Custom domain cleared for {args.slug}")
        else:
            print(f"Custom domain set for {args.slug}: {domain}")


def list_orgs(_args: argparse.Namespace) -> None:
    """List all organizations."""
    with get_sync_session() as session:
        organizations = (
            session.execute(select(Organization).order_by(Organization.slug))
            .scalars()
            .all()
        )

        if not organizations:
            print("No organizations found.")
            return

        print("Organizations:")
        for i, org in enumerate(organizations, 1):
            domain = org.custom_domain or "-"
            print(f"  {i}. {org.slug} [{org.name}] domain={domain}")


def check_slug(args: argparse.Namespace) -> None:
    """Report whether a slug is valid; exits 1 when it is not."""
    if is_slug_valid(args.slug):
        print(f"Slug is valid: {args.slug}")
        return
    reason = "reserved" if args.slug in RESERVED_SLUGS else "invalid format"
    print(f"Slug is not valid ({reason}): {args.slug}", file=sys.stderr)
    sys.exit(1)


def main() -> None:
    """Parse arguments and dispatch to command handler."""
    parser = argparse.ArgumentParser(description="Organization management CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    # create-org
    p = sub.add_parser("create-org", help="Create a new organization")
    p.add_argument("--name", required=True, help="Display name")
    p.add_argument("--slug", required=True, help="Subdomain slug")
    p.add_argument("--domain", default=None, help="Optional custom domain")

    # set-domain
    p = sub.add_parser("set-domain", help="Bind a custom domain")
    p.add_argument("--slug", required=True, help="Organization slug")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--domain", help="Custom domain to bind")
    group.add_argument("--clear", action="store_true", help="Remove custom domain")

    # list-orgs
    sub.add_parser("list-orgs", help="List all organizations")

    # check-slug
    p = sub.add_parser("check-slug", help="Validate a slug")
    p.add_argument("--slug", required=True, help="Slug to check")

    args = parser.parse_args()

    commands: dict[str, Callable[[argparse.Namespace], None]] = {
        "create-org": create_org,
        "set-domain": set_domain,
        "list-orgs": list_orgs,
        "check-slug": check_slug,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
