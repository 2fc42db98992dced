"""Link SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from linktracker.core.database import Base


class Link(Base):
    """Mapping from a slug to its destination URL."""

    __tablename__ = "links"
    # Never reuse ids of deleted links on SQLite
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
        comment="Operator-chosen short token (e.g., 'promo')",
    )
    url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Destination URL to redirect to",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Link {self.slug} -> {self.url[:50]}>"
