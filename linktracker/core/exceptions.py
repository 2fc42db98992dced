"""Domain errors raised by the link registry and click store."""


class LinkTrackerError(Exception):
    """Base class for all link tracker errors."""


class InvalidLinkError(LinkTrackerError):
    """A required link field is missing or malformed."""


class SlugConflictError(LinkTrackerError):
    """A link with the requested slug already exists."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug '{slug}' already exists")
        self.slug = slug


class LinkNotFoundError(LinkTrackerError):
    """No link is registered under the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Link '{slug}' not found")
        self.slug = slug


class StorageError(LinkTrackerError):
    """The backing store failed to complete an operation."""
