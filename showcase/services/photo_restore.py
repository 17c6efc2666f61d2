"""
Photo restore service.
Reconciles the image lists stored on properties with the files present on disk,
recovering files from the assets directory and from JSON snapshots.
"""

from pathlib import Path
from typing import List, Optional
import logging
import shutil
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.config import settings
from showcase.repositories.property import PropertyRepository
from showcase.schemas.photo import (
    AssetRecoveryResult,
    BatchRestoreResult,
    PropertyPhotoReport,
    RestorationReport,
    RestoreResult,
)
from showcase.services.image_validator import ImageValidator
from showcase.services.photo_backup import PhotoBackupService
from showcase.utils.file_utils import FileStorage

logger = logging.getLogger(__name__)


class PhotoRestoreService:
    """
    Service for restoring property photos.

    Every operation reports problems through the ``errors`` list of its result
    and keeps going; nothing here raises for a single bad file or property.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        validator: Optional[ImageValidator] = None,
        backups: Optional[PhotoBackupService] = None,
        assets_dir: Optional[Path] = None
    ):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.validator = validator or ImageValidator()
        self.backups = backups or PhotoBackupService()
        self.assets_dir = Path(assets_dir or settings.assets_dir)
        self.asset_validator = ImageValidator(
            uploads_dir=self.assets_dir,
            images_dir=self.assets_dir,
            max_file_size=self.validator.max_file_size,
            allowed_extensions=self.validator.allowed_extensions
        )

    @property
    def uploads_dir(self) -> Path:
        return self.validator.uploads_dir

    async def restore_property_images(
        self,
        property_id: uuid.UUID,
        dry_run: bool = False,
        check_file_existence: bool = True,
        use_backup: bool = False
    ) -> RestoreResult:
        """
        Restore the image list of one property.

        Args:
            property_id: Property to restore
            dry_run: Report what would happen without copying or writing
            check_file_existence: Inspect the filesystem; when False every reference is kept as is
            use_backup: Merge in the references of the latest snapshot

        Returns:
            RestoreResult describing restored, missing and copied images
        """
        result = RestoreResult(property_id=property_id, success=False, dry_run=dry_run)

        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            result.errors.append(f"Property {property_id} not found")
            return result

        await self._restore(property_id, list(property_obj.images or []), result, check_file_existence, use_backup)
        result.success = not result.errors
        return result

    async def _restore(
        self,
        property_id: uuid.UUID,
        stored_images: List[str],
        result: RestoreResult,
        check_file_existence: bool,
        use_backup: bool
    ) -> None:
        # Plain values only; a failed commit expires every loaded property
        references = list(stored_images)

        if use_backup:
            backup = await self.backups.latest_backup(property_id)
            if backup:
                references = self._merge(references, backup.images)
            else:
                logger.info(f"No photo backup found for property {property_id}")

        restored: List[str] = []
        for reference in references:
            if not check_file_existence:
                restored.append(reference)
                continue

            reconciled = self._reconcile(reference, result)
            if reconciled:
                restored.append(reconciled)
            else:
                result.missing_files.append(reference)

        result.restored_images = restored

        if result.dry_run or restored == stored_images:
            return

        try:
            await self.backups.create_backup(property_id, stored_images, "pre-restore")
        except OSError as e:
            result.errors.append(f"Failed to write backup: {e}")
            return

        try:
            await self.property_repo.update_images(property_id, restored)
            result.updated = True
        except SQLAlchemyError as e:
            logger.error(f"Failed to save restored images for property {property_id}: {e}")
            result.errors.append(f"Database update failed: {e}")
            return

        logger.info(
            f"Restored {len(restored)} images for property {property_id} "
            f"({len(result.missing_files)} missing, {len(result.copied_files)} copied)"
        )

    def _reconcile(self, reference: str, result: RestoreResult) -> Optional[str]:
        """
        Return the reference to keep for ``reference``, or None when it is missing.

        A file that is present but fails validation is replaced from the assets
        directory when a valid copy exists there.
        """
        filename = self.validator.normalize_filename(reference)

        located = self.validator.locate(reference)
        if located is not None:
            check = self.validator.validate_image_exists(reference)
            if check.is_valid:
                if located.parent == self.uploads_dir:
                    return self.validator.public_url(filename)
                return reference
            logger.warning(f"Stored image {filename} is unusable ({check.error}), looking for an asset copy")

        if not filename or not (self.assets_dir / filename).is_file():
            return None

        asset_check = self.asset_validator.validate_image_exists(filename)
        if not asset_check.is_valid:
            result.errors.append(f"Validation failed for {filename}: {asset_check.error}")
            return None

        if not result.dry_run:
            destination = self.uploads_dir / filename
            try:
                self.uploads_dir.mkdir(parents=True, exist_ok=True)
                shutil.copy2(self.assets_dir / filename, destination)
            except OSError as e:
                result.errors.append(f"Failed to copy {filename}: {e}")
                return None

            check = self.validator.validate_image_exists(filename)
            if not check.is_valid:
                destination.unlink(missing_ok=True)
                result.errors.append(f"Validation failed for {filename}: {check.error}")
                return None

        result.copied_files.append(filename)
        return self.validator.public_url(filename)

    def _merge(self, current: List[str], extra: List[str]) -> List[str]:
        seen = {self.validator.normalize_filename(ref) for ref in current}
        merged = list(current)
        for reference in extra:
            name = self.validator.normalize_filename(reference)
            if name and name not in seen:
                seen.add(name)
                merged.append(reference)
        return merged

    async def restore_all_properties(
        self,
        dry_run: bool = False,
        check_file_existence: bool = True,
        use_backup: bool = False
    ) -> BatchRestoreResult:
        """Restore every property, continuing past failures."""
        batch = BatchRestoreResult(success=False, dry_run=dry_run)

        try:
            properties = await self.property_repo.get_all_properties()
            targets = [(p.id, list(p.images or [])) for p in properties]
        except SQLAlchemyError as e:
            logger.error(f"Failed to load properties for restore: {e}")
            batch.errors.append(f"Failed to load properties: {e}")
            return batch

        for property_id, stored_images in targets:
            result = RestoreResult(property_id=property_id, success=False, dry_run=dry_run)
            try:
                await self._restore(property_id, stored_images, result, check_file_existence, use_backup)
            except (SQLAlchemyError, OSError) as e:
                logger.error(f"Restore failed for property {property_id}: {e}")
                result.errors.append(str(e))
            result.success = not result.errors

            batch.results.append(result)
            batch.processed_properties += 1
            batch.total_restored += len(result.restored_images)
            batch.total_missing += len(result.missing_files)
            batch.total_copied += len(result.copied_files)
            batch.errors.extend(f"{property_id}: {error}" for error in result.errors)

        batch.success = not batch.errors
        logger.info(
            f"Restore run finished: {batch.processed_properties} properties, "
            f"{batch.total_restored} restored, {batch.total_missing} missing",
            extra={"dry_run": dry_run, "copied": batch.total_copied}
        )
        return batch

    def recover_assets(self, dry_run: bool = False) -> AssetRecoveryResult:
        """
        Copy allowed images from the assets directory into the uploads directory.

        Files already present are skipped; copies that fail validation are removed.
        """
        result = AssetRecoveryResult(success=False, dry_run=dry_run)

        if not self.assets_dir.is_dir():
            result.errors.append(f"Assets directory not found: {self.assets_dir}")
            return result

        for source in FileStorage(self.assets_dir).list_images(self.validator.allowed_extensions):
            destination = self.uploads_dir / source.name
            if destination.exists():
                result.skipped.append(source.name)
                continue
            if dry_run:
                result.copied.append(source.name)
                continue

            try:
                self.uploads_dir.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, destination)
            except OSError as e:
                result.errors.append(f"Failed to copy {source.name}: {e}")
                continue

            check = self.validator.validate_image_exists(source.name)
            if check.is_valid:
                result.copied.append(source.name)
            else:
                destination.unlink(missing_ok=True)
                result.invalid.append(source.name)

        result.success = not result.errors
        logger.info(
            f"Asset recovery: {len(result.copied)} copied, {len(result.skipped)} skipped, "
            f"{len(result.invalid)} invalid"
        )
        return result

    async def restoration_report(self) -> RestorationReport:
        """Per-property counts of referenced, valid and missing images."""
        report = RestorationReport()
        for property_obj in await self.property_repo.get_all_properties():
            validation = self.validator.validate_image_list(property_obj.images or [])
            entry = PropertyPhotoReport(
                property_id=property_obj.id,
                title=property_obj.title,
                referenced=len(property_obj.images or []),
                valid=len(validation.valid_images),
                missing=[item.filename for item in validation.invalid_images]
            )
            report.properties.append(entry)
            report.total_referenced += entry.referenced
            report.total_valid += entry.valid
            report.total_missing += len(entry.missing)
            if entry.missing:
                report.properties_with_missing += 1

        report.total_properties = len(report.properties)
        return report
