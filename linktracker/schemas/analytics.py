"""Pydantic schemas for click analytics."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ClickMetrics(BaseModel):
    """Request metadata captured for one redirect.

    Every field is optional. Missing values stay ``None`` and are dropped
    when the payload is serialized for storage.
    """

    ip: str | None = Field(default=None, description="Client IP address")
    user_agent: str | None = Field(default=None, description="HTTP User-Agent header")
    referer: str | None = Field(default=None, description="HTTP Referer header")
    country: str | None = Field(default=None, description="ISO 3166-1 alpha-2 country code")
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    utm_term: str | None = None
    utm_content: str | None = None
    utm_purpose: str | None = None

    model_config = {"json_schema_extra": {"example": {
        "ip": "203.0.113.7",
        "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        "referer": "https://news.example.org/",
        "country": "NO",
        "city": "Oslo",
        "utm_source": "newsletter",
        "utm_campaign": "spring",
    }}}

    def to_payload(self) -> dict[str, Any]:
        """Serialize for storage, omitting absent fields."""
        return self.model_dump(mode="json", exclude_none=True)


class ClickEventResponse(BaseModel):
    """A stored click event."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    link_id: int
    clicked_at: datetime
    metrics: dict[str, Any]
