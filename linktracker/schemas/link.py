"""Link Pydantic schemas."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

# Slugs are URL-safe tokens; a dot would make the path look like an asset
SLUG_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

# Paths served by the application itself
RESERVED_SLUGS = frozenset({"api", "analytics", "metrics", "health", "docs", "redoc"})

_http_url = TypeAdapter(HttpUrl)


class LinkCreate(BaseModel):
    """Schema for creating a new link."""

    slug: str = Field(min_length=1, max_length=64, description="Short token to register")
    url: str = Field(min_length=1, max_length=2083, description="Destination URL")

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        """Validate slug format."""
        if not SLUG_PATTERN.match(v):
            raise ValueError("Slug can only contain letters, numbers, hyphens, and underscores")
        if v.lower() in RESERVED_SLUGS:
            raise ValueError(f"Slug '{v}' is reserved")
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the URL but keep it exactly as submitted."""
        try:
            _http_url.validate_python(v)
        except ValidationError:
            raise ValueError("URL must be a valid http or https URL") from None
        return v


class LinkDelete(BaseModel):
    """Schema for deleting a link by slug."""

    slug: str = Field(min_length=1, max_length=64)


class LinkResponse(BaseModel):
    """Schema for link response."""

    model_config = ConfigDict(from_attributes=True)

    slug: str
    url: str
    created_at: datetime
