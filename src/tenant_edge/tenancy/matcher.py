"""Static path matcher: paths that never go through tenant routing."""

import re

# Framework assets, ACME challenges, root files and anything with an extension.
BYPASS_PATTERN = re.compile(
    r"^/(?:_next|static|\.well-known|favicon\.ico|robots\.txt|sitemap\.xml|.*\..*)"
)


def should_bypass(path: str) -> bool:
    return BYPASS_PATTERN.match(path) is not None
