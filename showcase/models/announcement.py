"""
Announcement model for timed promotional posts.
"""

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from showcase.database import Base
from datetime import datetime, timezone
import uuid
from typing import Optional


class Announcement(Base):
    """
    Promotional post shown on the public site while its window is open.
    A missing start or end date leaves that side of the window open.
    """

    __tablename__ = "announcements"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_highlighted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    def __repr__(self) -> str:
        return f"<Announcement(id={self.id}, title={self.title})>"

    def is_visible(self, now: Optional[datetime] = None) -> bool:
        """Check whether the announcement should be shown at ``now``."""
        if not self.is_active:
            return False

        now = now or datetime.now(timezone.utc)
        if self.start_date and _as_aware(self.start_date) > now:
            return False
        if self.end_date and _as_aware(self.end_date) < now:
            return False
        return True


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
