"""Tenant slug rules shared by the resolver, the store API and the CLI."""

import re

# Slugs that would alias the application's own routing namespace.
RESERVED_SLUGS: frozenset[str] = frozenset(
    {
        "api",
        "_next",
        "static",
        "public",
        "admin",
        "healthz",
        ".well-known",
        "favicon.ico",
        "robots.txt",
        "sitemap.xml",
    }
)

SLUG_PATTERN = re.compile(r"^[a-z0-9-]{3,63}$")


def is_slug_valid(slug: str) -> bool:
    """Return True if *slug* may identify a tenant.

    A valid slug is 3-63 characters of ``[a-z0-9-]``, does not start or
    end with a hyphen, has no ``--`` and is not a reserved word.
    """
    if slug in RESERVED_SLUGS:
        return False
    if not SLUG_PATTERN.fullmatch(slug):
        return False
    return not (slug.startswith("-") or slug.endswith("-") or "--" in slug)
