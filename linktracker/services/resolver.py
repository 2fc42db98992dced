"""Path classification and destination URL building for slug resolution."""

import enum
from collections.abc import Iterable
from urllib.parse import urlencode, urlsplit, urlunsplit

from linktracker.schemas.link import SLUG_PATTERN
from linktracker.services.metrics import is_utm_param


class PathKind(enum.Enum):
    """How an inbound path is handled."""

    ASSET = "asset"
    SLUG = "slug"
    MALFORMED = "malformed"


def classify_path(path: str) -> PathKind:
    """Classify an inbound path.

    Anything with a dot is treated as a static file, so a slug can never
    contain one. Paths that are not valid slugs are never looked up.
    """
    if "." in path:
        return PathKind.ASSET
    if SLUG_PATTERN.match(path):
        return PathKind.SLUG
    return PathKind.MALFORMED


def forwarded_params(query_items: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Query parameters passed on to the destination (everything but UTM)."""
    return [(name, value) for name, value in query_items if not is_utm_param(name)]


def build_destination_url(url: str, query_items: Iterable[tuple[str, str]]) -> str:
    """Append the forwarded query parameters to the destination URL.

    The destination's own query string is kept as-is and the request's
    non-UTM parameters follow it in their original order.
    """
    extra = forwarded_params(query_items)
    if not extra:
        return url

    parts = urlsplit(url)
    encoded = urlencode(extra)
    query = f"{parts.query}&{encoded}" if parts.query else encoded
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
