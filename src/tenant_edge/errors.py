"""Domain-specific exceptions for tenant-edge."""


class OrganizationNotFoundError(Exception):
    """Raised when no organization matches the requested identifier."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"No organization found for {identifier!r}")
