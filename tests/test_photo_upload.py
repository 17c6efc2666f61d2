"""
Tests for property photo uploads, removal and ordering.
"""

import uuid

import pytest

from showcase.config import settings
from showcase.services.photo_backup import PhotoBackupService
from showcase.services.photo_upload import PhotoUploadService, generate_alt_text
from showcase.utils.exceptions import (
    PhotoNotFoundError,
    PropertyNotFoundError,
    ResourceLimitExceededError,
    ValidationError,
)


@pytest.fixture
def photo_service(db_session) -> PhotoUploadService:
    return PhotoUploadService(db_session)


def test_generate_alt_text():
    assert generate_alt_text("Sea   view chalet", 2) == "Property Sea view chalet - Image 2"
    assert generate_alt_text("", 1) == "Property listing - Image 1"


class TestUploadPropertyPhotos:

    async def test_upload_appends_after_existing_images(
        self, photo_service, property_factory, make_upload, image_bytes, media_dirs
    ):
        prop = await property_factory.create(images=["/images/existing.jpg"])

        result = await photo_service.upload_property_photos(
            prop.id,
            [make_upload("one.jpg", image_bytes), make_upload("two.jpg", image_bytes)]
        )

        assert len(result.uploaded) == 2
        assert result.errors == []
        assert result.images[0] == "/images/existing.jpg"
        assert result.images[1:] == [photo.url for photo in result.uploaded]
        for photo in result.uploaded:
            assert photo.url == f"/uploads/properties/{photo.filename}"
            assert (media_dirs["photos"] / photo.filename).is_file()
        assert result.uploaded[0].alt_text == "Property Sea view chalet - Image 2"
        assert result.uploaded[1].alt_text == "Property Sea view chalet - Image 3"

    async def test_rejected_file_does_not_stop_the_batch(
        self, photo_service, property_factory, make_upload, image_bytes
    ):
        prop = await property_factory.create()

        result = await photo_service.upload_property_photos(
            prop.id,
            [make_upload("good.jpg", image_bytes), make_upload("bad.pdf", b"%PDF-1.4", "application/pdf")]
        )

        assert len(result.uploaded) == 1
        assert len(result.errors) == 1
        assert result.errors[0].startswith("bad.pdf: Unsupported file type")
        assert len(result.images) == 1

    async def test_all_files_rejected(self, photo_service, property_factory, make_upload, db_session):
        prop = await property_factory.create()

        with pytest.raises(ValidationError, match="All uploads failed"):
            await photo_service.upload_property_photos(prop.id, [make_upload("bad.jpg", b"garbage")])

        await db_session.refresh(prop)
        assert prop.images == []

    async def test_unknown_property(self, photo_service, make_upload, image_bytes):
        with pytest.raises(PropertyNotFoundError):
            await photo_service.upload_property_photos(uuid.uuid4(), [make_upload("a.jpg", image_bytes)])

    async def test_no_files(self, photo_service, property_factory):
        prop = await property_factory.create()

        with pytest.raises(ValidationError, match="No files provided"):
            await photo_service.upload_property_photos(prop.id, [])

    async def test_too_many_files(self, photo_service, property_factory, make_upload, image_bytes, monkeypatch):
        monkeypatch.setattr(settings, "max_files_per_upload", 1)
        prop = await property_factory.create()

        with pytest.raises(ResourceLimitExceededError):
            await photo_service.upload_property_photos(
                prop.id,
                [make_upload("a.jpg", image_bytes), make_upload("b.jpg", image_bytes)]
            )

    async def test_large_images_are_resized(
        self, photo_service, property_factory, make_upload, make_image_bytes, monkeypatch
    ):
        monkeypatch.setattr(settings, "max_image_width", 100)
        monkeypatch.setattr(settings, "max_image_height", 100)
        prop = await property_factory.create()

        result = await photo_service.upload_property_photos(
            prop.id, [make_upload("wide.jpg", make_image_bytes(size=(400, 200)))]
        )

        assert (result.uploaded[0].width, result.uploaded[0].height) == (100, 50)

    async def test_snapshot_written_before_upload(
        self, photo_service, property_factory, make_upload, image_bytes
    ):
        prop = await property_factory.create(images=["/images/existing.jpg"])

        await photo_service.upload_property_photos(prop.id, [make_upload("a.jpg", image_bytes)])

        backups = await PhotoBackupService().list_backups(prop.id)
        assert len(backups) == 1
        assert backups[0].reason == "pre-upload"
        assert backups[0].images == ["/images/existing.jpg"]


class TestRemoveAndReorder:

    async def test_remove_by_bare_filename(self, photo_service, property_factory, media_dirs, write_image):
        write_image(media_dirs["photos"], "a.jpg")
        prop = await property_factory.create(images=["/uploads/properties/a.jpg", "/uploads/properties/b.jpg"])

        response = await photo_service.remove_property_photo(prop.id, "a.jpg")

        assert response.images == ["/uploads/properties/b.jpg"]
        assert (media_dirs["photos"] / "a.jpg").exists()

    async def test_remove_and_delete_file(self, photo_service, property_factory, media_dirs, write_image):
        write_image(media_dirs["photos"], "a.jpg")
        prop = await property_factory.create(images=["/uploads/properties/a.jpg"])

        response = await photo_service.remove_property_photo(prop.id, "/uploads/properties/a.jpg", delete_file=True)

        assert response.images == []
        assert not (media_dirs["photos"] / "a.jpg").exists()

    async def test_remove_unknown_photo(self, photo_service, property_factory):
        prop = await property_factory.create(images=["/uploads/properties/a.jpg"])

        with pytest.raises(PhotoNotFoundError):
            await photo_service.remove_property_photo(prop.id, "other.jpg")

    async def test_reorder(self, photo_service, property_factory):
        images = ["/uploads/properties/a.jpg", "/uploads/properties/b.jpg", "/images/c.jpg"]
        prop = await property_factory.create(images=images)

        response = await photo_service.reorder_property_photos(prop.id, list(reversed(images)))

        assert response.images == list(reversed(images))

    @pytest.mark.parametrize("new_order", [
        ["/uploads/properties/a.jpg"],
        ["/uploads/properties/a.jpg", "/uploads/properties/x.jpg"],
        ["/uploads/properties/a.jpg", "/uploads/properties/b.jpg", "/uploads/properties/b.jpg"],
    ])
    async def test_reorder_must_be_a_permutation(self, photo_service, property_factory, new_order):
        prop = await property_factory.create(images=["/uploads/properties/a.jpg", "/uploads/properties/b.jpg"])

        with pytest.raises(ValidationError, match="exactly the current images"):
            await photo_service.reorder_property_photos(prop.id, new_order)

    async def test_validate_property_photos(self, photo_service, property_factory, media_dirs, write_image):
        write_image(media_dirs["photos"], "a.jpg")
        prop = await property_factory.create(images=["/uploads/properties/a.jpg", "/uploads/properties/gone.jpg"])

        validation = await photo_service.validate_property_photos(prop.id)

        assert validation.valid_images == ["/uploads/properties/a.jpg"]
        assert len(validation.invalid_images) == 1

    def test_delete_photo_files(self, photo_service, media_dirs, write_image):
        write_image(media_dirs["photos"], "a.jpg")
        write_image(media_dirs["images_dir"], "static.jpg")

        deleted = photo_service.delete_photo_files(["/uploads/properties/a.jpg", "/images/static.jpg"])

        assert deleted == 1
        assert (media_dirs["images_dir"] / "static.jpg").exists()
