"""
Announcement repository with active-window queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, desc
from showcase.repositories.base import BaseRepository
from showcase.models.announcement import Announcement
from datetime import datetime, timezone
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)


class AnnouncementRepository(BaseRepository[Announcement]):
    """Repository for announcements shown on the public site."""

    def __init__(self, db: AsyncSession):
        super().__init__(Announcement, db)

    async def get_visible(
        self,
        now: Optional[datetime] = None,
        highlighted_only: bool = False,
        limit: int = 50
    ) -> List[Announcement]:
        """
        Get announcements whose active window contains ``now``.

        Featured announcements come first, then the newest.
        """
        now = now or datetime.now(timezone.utc)
        conditions = [
            Announcement.is_active.is_(True),
            or_(Announcement.start_date.is_(None), Announcement.start_date <= now),
            or_(Announcement.end_date.is_(None), Announcement.end_date >= now),
        ]
        if highlighted_only:
            conditions.append(Announcement.is_highlighted.is_(True))

        query = (
            select(Announcement)
            .where(*conditions)
            .order_by(desc(Announcement.is_featured), desc(Announcement.created_at))
            .limit(limit)
        )
        announcements = list((await self.db.execute(query)).scalars().all())
        logger.debug(f"Found {len(announcements)} visible announcements")
        return announcements
