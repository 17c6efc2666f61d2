"""
API tests through the ASGI application.
Covers authentication, the public catalog, the dashboard endpoints and the photo pipeline.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from showcase.models.property import PropertyStatus
from showcase.models.user import UserRole

API = "/api/v1"


def _property_payload(**overrides) -> dict:
    payload = {
        "title": "Sea view chalet",
        "description": "Two bedroom chalet a short walk from the beach",
        "address": "Marassi, North Coast",
        "city": "North Coast",
        "property_type": "chalet",
        "price": "8500000",
        "bedrooms": 2,
        "bathrooms": 2,
    }
    payload.update(overrides)
    return payload


class TestHealth:

    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["api_prefix"] == API
        assert "X-Request-ID" in response.headers

    async def test_health(self, client, monkeypatch):
        async def connected():
            return True

        monkeypatch.setattr("showcase.main.test_database_connection", connected)
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    async def test_health_without_database(self, client, monkeypatch):
        async def disconnected():
            return False

        monkeypatch.setattr("showcase.main.test_database_connection", disconnected)
        response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "HTTP_503"


class TestAuthEndpoints:

    async def test_login_and_me(self, client, admin_user):
        response = await client.post(f"{API}/auth/login", json={"username": "admin", "password": "testpassword123"})

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "admin"
        assert "hashed_password" not in data["user"]

        me = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
        assert me.status_code == 200
        assert me.json()["username"] == "admin"

    async def test_login_failure_uses_error_envelope(self, client, admin_user):
        response = await client.post(f"{API}/auth/login", json={"username": "admin", "password": "wrong-password1"})

        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "UNAUTHORIZED"
        assert error["request_id"] == response.headers["X-Request-ID"]

    async def test_refresh(self, client, admin_user):
        login = await client.post(f"{API}/auth/login", json={"username": "admin", "password": "testpassword123"})

        response = await client.post(f"{API}/auth/refresh", json={"refresh_token": login.json()["refresh_token"]})

        assert response.status_code == 200
        assert response.json()["access_token"]

    async def test_me_requires_token(self, client):
        response = await client.get(f"{API}/auth/me")
        assert response.status_code == 401

    async def test_change_password(self, client, admin_user, admin_headers):
        response = await client.post(
            f"{API}/auth/change-password",
            json={"current_password": "testpassword123", "new_password": "newpassword456"},
            headers=admin_headers
        )
        assert response.status_code == 204

        login = await client.post(f"{API}/auth/login", json={"username": "admin", "password": "newpassword456"})
        assert login.status_code == 200


class TestPublicCatalog:

    async def test_list_only_published(self, client, property_factory):
        await property_factory.create(title="Live listing")
        await property_factory.create(title="Draft listing", status=PropertyStatus.DRAFT)

        response = await client.get(f"{API}/properties")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["properties"][0]["title"] == "Live listing"
        assert data["total_pages"] == 1
        assert data["has_next"] is False

    async def test_staff_see_every_status(self, client, property_factory, admin_headers):
        await property_factory.create(title="Live listing")
        await property_factory.create(title="Draft listing", status=PropertyStatus.DRAFT)

        response = await client.get(f"{API}/properties", params={"status": "draft"}, headers=admin_headers)

        assert [p["title"] for p in response.json()["properties"]] == ["Draft listing"]

    async def test_filters_and_pagination(self, client, property_factory):
        for i in range(3):
            await property_factory.create(title=f"Cairo flat {i}", city="Cairo", bedrooms=3)
        await property_factory.create(title="Coast chalet")

        response = await client.get(
            f"{API}/properties",
            params={"location": "cairo", "min_bedrooms": 3, "page": 2, "page_size": 2}
        )

        data = response.json()
        assert data["total"] == 3
        assert data["total_pages"] == 2
        assert len(data["properties"]) == 1
        assert data["has_previous"] is True

    async def test_invalid_sort_order(self, client):
        response = await client.get(f"{API}/properties", params={"sort_order": "sideways"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_price_range_validation(self, client):
        response = await client.get(f"{API}/properties", params={"min_price": 10, "max_price": 5})
        assert response.status_code == 422

    async def test_shortcuts(self, client, property_factory):
        await property_factory.create(title="Featured", is_featured=True, city="Cairo", project_name="Mivida")
        await property_factory.create(title="Highlighted", is_highlighted=True, city="Giza")

        featured = await client.get(f"{API}/properties/featured")
        highlighted = await client.get(f"{API}/properties/highlighted")
        new = await client.get(f"{API}/properties/new")
        cities = await client.get(f"{API}/properties/cities")
        projects = await client.get(f"{API}/properties/projects")

        assert [p["title"] for p in featured.json()] == ["Featured"]
        assert [p["title"] for p in highlighted.json()] == ["Highlighted"]
        assert len(new.json()) == 2
        assert cities.json() == ["Cairo", "Giza"]
        assert projects.json() == ["Mivida"]

    async def test_detail_counts_public_views_only(self, client, property_factory, admin_headers):
        prop = await property_factory.create()

        public = await client.get(f"{API}/properties/{prop.id}")
        staff = await client.get(f"{API}/properties/{prop.id}", headers=admin_headers)

        assert public.json()["views"] == 1
        assert staff.json()["views"] == 1

    async def test_draft_detail_is_not_found_for_visitors(self, client, property_factory, user_headers):
        prop = await property_factory.create(status=PropertyStatus.DRAFT)

        response = await client.get(f"{API}/properties/{prop.id}", headers=user_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_malformed_id(self, client):
        response = await client.get(f"{API}/properties/not-a-uuid")
        assert response.status_code == 422


class TestPropertyManagement:

    async def test_create_requires_staff(self, client, user_headers):
        anonymous = await client.post(f"{API}/properties", json=_property_payload())
        visitor = await client.post(f"{API}/properties", json=_property_payload(), headers=user_headers)

        assert anonymous.status_code == 401
        assert visitor.status_code == 403

    async def test_create_update_delete(self, client, admin_headers, media_dirs, write_image):
        created = await client.post(f"{API}/properties", json=_property_payload(), headers=admin_headers)
        assert created.status_code == 201
        property_id = created.json()["id"]

        updated = await client.patch(
            f"{API}/properties/{property_id}",
            json={"price": "9000000", "status": "draft"},
            headers=admin_headers
        )
        assert updated.status_code == 200
        assert updated.json()["status"] == "draft"
        assert float(updated.json()["price"]) == 9000000

        write_image(media_dirs["photos"], "a.jpg")
        with_photo = await client.patch(
            f"{API}/properties/{property_id}",
            json={"images": ["/uploads/properties/a.jpg"]},
            headers=admin_headers
        )
        assert with_photo.json()["main_image"] == "/uploads/properties/a.jpg"
        deleted = await client.delete(
            f"{API}/properties/{property_id}", params={"delete_photos": True}, headers=admin_headers
        )
        assert deleted.status_code == 204
        assert not (media_dirs["photos"] / "a.jpg").exists()

        missing = await client.get(f"{API}/properties/{property_id}", headers=admin_headers)
        assert missing.status_code == 404

    async def test_create_validation_error(self, client, admin_headers):
        response = await client.post(f"{API}/properties", json=_property_payload(price="-1"), headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["error"]["details"]


class TestPhotoEndpoints:

    async def test_upload_reorder_remove(self, client, property_factory, admin_headers, image_bytes, media_dirs):
        prop = await property_factory.create()

        upload = await client.post(
            f"{API}/properties/{prop.id}/photos",
            files=[
                ("files", ("one.jpg", image_bytes, "image/jpeg")),
                ("files", ("two.jpg", image_bytes, "image/jpeg")),
            ],
            headers=admin_headers
        )
        assert upload.status_code == 201
        images = upload.json()["images"]
        assert len(images) == 2

        reordered = await client.put(
            f"{API}/properties/{prop.id}/photos/order",
            json={"images": list(reversed(images))},
            headers=admin_headers
        )
        assert reordered.json()["images"] == list(reversed(images))

        removed = await client.delete(
            f"{API}/properties/{prop.id}/photos",
            params={"image": images[0], "delete_file": True},
            headers=admin_headers
        )
        assert removed.json()["images"] == [images[1]]
        assert not (media_dirs["photos"] / images[0].rsplit("/", 1)[-1]).exists()

        backups = await client.get(f"{API}/properties/{prop.id}/photos/backups", headers=admin_headers)
        assert {b["reason"] for b in backups.json()} == {"pre-upload", "pre-remove"}

    async def test_upload_rejects_everything(self, client, property_factory, admin_headers):
        prop = await property_factory.create()

        response = await client.post(
            f"{API}/properties/{prop.id}/photos",
            files=[("files", ("doc.pdf", b"%PDF-1.4", "application/pdf"))],
            headers=admin_headers
        )

        assert response.status_code == 422
        assert "All uploads failed" in response.json()["error"]["message"]
        assert response.json()["error"]["details"][0]["field"] == "doc.pdf"

    async def test_upload_requires_staff(self, client, property_factory, user_headers, image_bytes):
        prop = await property_factory.create()

        response = await client.post(
            f"{API}/properties/{prop.id}/photos",
            files=[("files", ("one.jpg", image_bytes, "image/jpeg"))],
            headers=user_headers
        )

        assert response.status_code == 403

    async def test_validate_and_report(self, client, property_factory, admin_headers, media_dirs, write_image):
        write_image(media_dirs["photos"], "a.jpg")
        prop = await property_factory.create(images=["/uploads/properties/a.jpg", "/uploads/properties/gone.jpg"])

        validation = await client.get(f"{API}/properties/{prop.id}/photos/validate", headers=admin_headers)
        single = await client.get(f"{API}/photos/validate", params={"filename": "a.jpg"}, headers=admin_headers)
        report = await client.get(f"{API}/photos/report", headers=admin_headers)

        assert validation.json()["valid_images"] == ["/uploads/properties/a.jpg"]
        assert single.json()["is_valid"] is True
        assert report.json()["total_missing"] == 1

    async def test_restore_endpoints(self, client, property_factory, admin_headers, media_dirs, write_image):
        write_image(media_dirs["assets_dir"], "lost.jpg")
        prop = await property_factory.create(images=["/uploads/properties/lost.jpg"])

        dry = await client.post(
            f"{API}/photos/restore/{prop.id}", params={"dry_run": True}, headers=admin_headers
        )
        assert dry.json()["copied_files"] == ["lost.jpg"]
        assert not (media_dirs["photos"] / "lost.jpg").exists()

        batch = await client.post(f"{API}/photos/restore", headers=admin_headers)
        assert batch.json()["total_copied"] == 1
        assert (media_dirs["photos"] / "lost.jpg").is_file()

        recovery = await client.post(f"{API}/photos/recover-assets", headers=admin_headers)
        assert recovery.json()["skipped"] == ["lost.jpg"]

    async def test_restore_unknown_property(self, client, admin_headers):
        response = await client.post(f"{API}/photos/restore/{uuid.uuid4()}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["success"] is False


class TestAnnouncementEndpoints:

    async def test_lifecycle(self, client, admin_headers, image_bytes):
        created = await client.post(
            f"{API}/announcements",
            json={"title": "Launch", "content": "Phase two is open", "is_highlighted": True},
            headers=admin_headers
        )
        assert created.status_code == 201
        announcement_id = created.json()["id"]

        public = await client.get(f"{API}/announcements")
        highlighted = await client.get(f"{API}/announcements/highlighted")
        assert [a["id"] for a in public.json()] == [announcement_id]
        assert [a["id"] for a in highlighted.json()] == [announcement_id]

        image = await client.post(
            f"{API}/announcements/{announcement_id}/image",
            files={"file": ("banner.jpg", image_bytes, "image/jpeg")},
            headers=admin_headers
        )
        assert image.json()["image"].startswith("/uploads/announcements/")

        hidden = await client.patch(
            f"{API}/announcements/{announcement_id}", json={"is_active": False}, headers=admin_headers
        )
        assert hidden.json()["is_active"] is False
        assert (await client.get(f"{API}/announcements/{announcement_id}")).status_code == 404
        assert (await client.get(f"{API}/announcements/{announcement_id}", headers=admin_headers)).status_code == 200

        listing = await client.get(f"{API}/announcements/all", headers=admin_headers)
        assert listing.json()["total"] == 1

        deleted = await client.delete(f"{API}/announcements/{announcement_id}", headers=admin_headers)
        assert deleted.status_code == 204

    async def test_invalid_window(self, client, admin_headers):
        now = datetime.now(timezone.utc)
        response = await client.post(
            f"{API}/announcements",
            json={
                "title": "Sale",
                "content": "x",
                "start_date": now.isoformat(),
                "end_date": (now - timedelta(days=1)).isoformat(),
            },
            headers=admin_headers
        )

        assert response.status_code == 422


class TestSiteSettingsEndpoints:

    async def test_public_read_and_staff_update(self, client, admin_headers, user_headers, make_image_bytes):
        public = await client.get(f"{API}/site-settings")
        assert public.json()["company_name"] == "Property Showcase"

        forbidden = await client.patch(f"{API}/site-settings", json={"company_name": "X"}, headers=user_headers)
        assert forbidden.status_code == 403

        updated = await client.patch(
            f"{API}/site-settings", json={"company_name": "Nile Homes"}, headers=admin_headers
        )
        assert updated.json()["company_name"] == "Nile Homes"

        logo = await client.post(
            f"{API}/site-settings/logo",
            files={"file": ("logo.png", make_image_bytes("PNG"), "image/png")},
            headers=admin_headers
        )
        assert logo.json()["logo_url"].startswith("/uploads/branding/")


class TestUserEndpoints:

    async def test_staff_manage_users(self, client, owner_headers, owner_user):
        created = await client.post(
            f"{API}/users",
            json={"username": "sara.admin", "email": "sara@example.com", "password": "password123", "role": "admin"},
            headers=owner_headers
        )
        assert created.status_code == 201
        user_id = created.json()["id"]

        listing = await client.get(f"{API}/users", params={"role": "admin"}, headers=owner_headers)
        assert [u["username"] for u in listing.json()["users"]] == ["sara.admin"]

        updated = await client.patch(f"{API}/users/{user_id}", json={"first_name": "Sara"}, headers=owner_headers)
        assert updated.json()["full_name"] == "Sara"

        deleted = await client.delete(f"{API}/users/{user_id}", headers=owner_headers)
        assert deleted.status_code == 204
        assert (await client.get(f"{API}/users/{user_id}", headers=owner_headers)).status_code == 404

    async def test_visitors_cannot_list_users(self, client, user_headers):
        response = await client.get(f"{API}/users", headers=user_headers)
        assert response.status_code == 403

    async def test_duplicate_user_conflict(self, client, owner_headers, owner_user):
        response = await client.post(
            f"{API}/users",
            json={"username": "owner", "email": "another@example.com", "password": "password123"},
            headers=owner_headers
        )

        assert response.status_code == 409

    async def test_role_in_token_is_not_trusted(self, client, db_session, user_factory, auth_headers):
        demoted = await user_factory.create(username="former.admin", role=UserRole.ADMIN)
        headers = auth_headers(demoted)
        demoted.role = UserRole.USER
        await db_session.commit()

        response = await client.get(f"{API}/users", headers=headers)

        assert response.status_code == 403


@pytest.mark.parametrize("path", ["/api/v1/nothing-here", "/uploads/properties/missing.jpg"])
async def test_unknown_paths_use_error_envelope(client, path):
    response = await client.get(path)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "HTTP_404"
