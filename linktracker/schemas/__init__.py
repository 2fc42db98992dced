"""Pydantic schemas."""

from linktracker.schemas.analytics import ClickEventResponse, ClickMetrics
from linktracker.schemas.link import (
    RESERVED_SLUGS,
    SLUG_PATTERN,
    LinkCreate,
    LinkDelete,
    LinkResponse,
)

__all__ = [
    "ClickEventResponse",
    "ClickMetrics",
    "RESERVED_SLUGS",
    "SLUG_PATTERN",
    "LinkCreate",
    "LinkDelete",
    "LinkResponse",
]
