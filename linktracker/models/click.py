"""ClickEvent SQLAlchemy model for storing raw click events."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from linktracker.core.database import Base


class ClickEvent(Base):
    """A single resolution of a slug to its destination.

    Rows are append-only. The metrics payload is stored as an opaque
    JSON document and is never queried by the store itself.
    """

    __tablename__ = "click_events"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    link_id: Mapped[int] = mapped_column(
        ForeignKey("links.id", ondelete="CASCADE"),
        nullable=False,
        comment="Link that was resolved",
    )
    clicked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Timestamp when the click was stored",
    )
    metrics: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        comment="Request metadata captured at redirect time",
    )

    # Composite index for history queries
    __table_args__ = (
        Index("ix_click_events_link_id_clicked_at", "link_id", "clicked_at"),
    )

    def __repr__(self) -> str:
        return f"<ClickEvent {self.id} link={self.link_id} at={self.clicked_at}>"
