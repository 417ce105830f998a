"""Host header validation and normalization.

The ``Host`` header is attacker-controlled; this is the only gate before the
value is used in URL construction, lookups and log lines.
"""

import re

import structlog

logger = structlog.get_logger()

MAX_HOST_LENGTH = 253

HOST_PATTERN = re.compile(r"^[a-z0-9.-]+(?::\d{1,5})?$")

SUSPICIOUS_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\.\."),  # path traversal
    re.compile(r"[<>]"),  # markup injection
    re.compile(r"['\"`]"),  # quote injection
    re.compile(r"[{}]"),  # template injection
    re.compile(r"javascript:", re.IGNORECASE),
)


def is_suspicious(value: str) -> bool:
    """Return True if *value* contains any injection-like pattern."""
    return any(pattern.search(value) for pattern in SUSPICIOUS_PATTERNS)


def normalize_host(raw: str | None) -> str | None:
    """Validate a raw host header and return the normalized hostname.

    Normalization lowercases, drops the port, one trailing dot and any
    leading ``www.`` labels. Returns ``None`` for anything that is missing,
    oversized, suspicious or not a plain ``host[:port]`` value.

    The length limit applies to the raw value, so ``www.`` + *host* only
    normalizes like *host* while the prefixed form fits in 253 characters.
    """
    if not raw:
        logger.debug("host_header_missing")
        return None

    value = raw.strip().lower()

    if len(value) > MAX_HOST_LENGTH:
        logger.warning("host_header_too_long", length=len(value))
        return None

    if is_suspicious(value):
        logger.warning("host_header_suspicious", host=value[:64])
        return None

    if not HOST_PATTERN.fullmatch(value):
        logger.warning("host_header_invalid_format", host=value[:64])
        return None

    host = value.split(":", maxsplit=1)[0].removesuffix(".")
    while host.startswith("www."):
        host = host[4:]
    if not host:
        logger.warning("host_header_invalid_format", host=value[:64])
        return None
    return host
