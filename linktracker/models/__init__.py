"""SQLAlchemy models.

All models should be imported here for Alembic to detect them.
"""

from linktracker.core.database import Base
from linktracker.models.click import ClickEvent
from linktracker.models.link import Link

__all__ = ["Base", "ClickEvent", "Link"]
