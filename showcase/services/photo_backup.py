"""
JSON snapshots of property image lists.
Written before destructive photo operations so a lost list can be recovered.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
import json
import logging
import uuid

import aiofiles

from showcase.config import settings
from showcase.schemas.photo import PhotoBackup

logger = logging.getLogger(__name__)


class PhotoBackupService:
    """Stores snapshots as ``<property_id>-<timestamp>.json`` files."""

    def __init__(self, backup_dir: Optional[Path] = None):
        self.backup_dir = Path(backup_dir or settings.photo_backup_dir)

    async def create_backup(self, property_id: uuid.UUID, images: List[str], reason: str) -> PhotoBackup:
        """Write a snapshot of ``images`` and return it."""
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        created_at = datetime.now(timezone.utc)
        name = f"{property_id}-{created_at.strftime('%Y%m%dT%H%M%S%f')}.json"
        path = self.backup_dir / name
        counter = 1
        while path.exists():
            path = self.backup_dir / f"{property_id}-{created_at.strftime('%Y%m%dT%H%M%S%f')}-{counter}.json"
            counter += 1

        backup = PhotoBackup(
            property_id=property_id,
            images=list(images),
            reason=reason,
            created_at=created_at,
            name=path.name
        )
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(backup.model_dump_json(indent=2))

        logger.info(f"Saved {len(images)} image references of property {property_id} ({reason})")
        return backup

    async def list_backups(self, property_id: uuid.UUID) -> List[PhotoBackup]:
        """Snapshots of a property, newest first. Unreadable files are skipped."""
        if not self.backup_dir.is_dir():
            return []

        backups = []
        for path in sorted(self.backup_dir.glob(f"{property_id}-*.json"), reverse=True):
            try:
                async with aiofiles.open(path, "r", encoding="utf-8") as f:
                    data = json.loads(await f.read())
                data["name"] = path.name
                backups.append(PhotoBackup.model_validate(data))
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping unreadable photo backup {path}: {e}")

        backups.sort(key=lambda backup: backup.created_at, reverse=True)
        return backups

    async def latest_backup(self, property_id: uuid.UUID) -> Optional[PhotoBackup]:
        backups = await self.list_backups(property_id)
        return backups[0] if backups else None
