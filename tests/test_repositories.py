"""
Tests for repository classes.
Covers CRUD operations, catalog search filters and the active-window queries.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from showcase.models.property import ListingType, PropertyStatus, PropertyType
from showcase.models.user import UserRole
from showcase.repositories.announcement import AnnouncementRepository
from showcase.repositories.property import PropertyRepository, PropertySearchFilters
from showcase.repositories.site_settings import SiteSettingsRepository
from showcase.repositories.user import UserRepository


class TestBaseRepository:
    """Test base repository functionality through UserRepository."""

    async def test_create_and_get(self, db_session, user_factory):
        user = await user_factory.create(username="sara", email="Sara@Example.com")
        repo = UserRepository(db_session)

        fetched = await repo.get_by_id(user.id)

        assert fetched.username == "sara"
        assert fetched.email == "sara@example.com"
        assert fetched.created_at is not None
        assert fetched.hashed_password != "testpassword123"

    async def test_get_missing(self, db_session):
        assert await UserRepository(db_session).get_by_id(uuid.uuid4()) is None

    async def test_update_skips_none_by_default(self, db_session, user_factory):
        user = await user_factory.create()
        repo = UserRepository(db_session)

        updated = await repo.update(user.id, {"first_name": "Sara", "last_name": None})

        assert updated.first_name == "Sara"
        assert await repo.update(uuid.uuid4(), {"first_name": "x"}) is None

    async def test_delete_and_count(self, db_session, user_factory):
        user = await user_factory.create()
        await user_factory.create(role=UserRole.ADMIN)
        repo = UserRepository(db_session)

        assert await repo.count() == 2
        assert await repo.delete(user.id) is True
        assert await repo.delete(user.id) is False
        assert await repo.count_by_role(UserRole.ADMIN) == 1

    async def test_get_by_field_rejects_unknown_column(self, db_session):
        with pytest.raises(ValueError):
            await UserRepository(db_session).get_by_field("nope", 1)


class TestUserRepository:

    async def test_duplicate_username(self, db_session, user_factory):
        await user_factory.create(username="sara")

        with pytest.raises(ValueError, match="already exists"):
            await user_factory.create(username="sara")

    async def test_authenticate_by_username_or_email(self, db_session, user_factory):
        await user_factory.create(username="sara", email="sara@example.com")
        repo = UserRepository(db_session)

        assert (await repo.authenticate_user("sara", "testpassword123")).username == "sara"
        assert (await repo.authenticate_user("SARA@example.com", "testpassword123")).username == "sara"
        assert await repo.authenticate_user("sara", "wrong-password1") is None
        assert await repo.authenticate_user("nobody", "testpassword123") is None

    async def test_search_users(self, db_session, user_factory):
        await user_factory.create(username="sara.admin", role=UserRole.ADMIN)
        await user_factory.create(username="omar", is_active=False)
        repo = UserRepository(db_session)

        users, total = await repo.search_users(search_term="sara")
        assert total == 1 and users[0].username == "sara.admin"

        users, total = await repo.search_users(is_active=False)
        assert [u.username for u in users] == ["omar"]


class TestPropertyRepository:

    async def test_create_validates_model_rules(self, property_factory):
        with pytest.raises(ValueError, match="Price must be greater than 0"):
            await property_factory.create(price=Decimal("0"))
        with pytest.raises(ValueError, match="latitude and longitude"):
            await property_factory.create(latitude=Decimal("30.0"))

    async def test_create_dedupes_images(self, property_factory):
        prop = await property_factory.create(images=["a.jpg", "b.jpg", "a.jpg", ""])
        assert prop.images == ["a.jpg", "b.jpg"]

    async def test_search_only_published_by_default(self, db_session, property_factory):
        await property_factory.create(title="Published chalet")
        await property_factory.create(title="Draft chalet", status=PropertyStatus.DRAFT)
        repo = PropertyRepository(db_session)

        properties, total = await repo.search_properties(PropertySearchFilters())
        assert total == 1
        assert properties[0].title == "Published chalet"

        _, total = await repo.search_properties(PropertySearchFilters(status=None))
        assert total == 2

    async def test_search_filters(self, db_session, property_factory):
        await property_factory.create(
            title="Cairo apartment",
            city="Cairo",
            address="New Cairo",
            property_type=PropertyType.APARTMENT,
            listing_type=ListingType.RESALE,
            price=Decimal("3000000"),
            bedrooms=3,
            installment_amount=Decimal("50000"),
        )
        await property_factory.create(
            title="Dubai villa",
            city="Dubai",
            country="UAE",
            property_type=PropertyType.VILLA,
            price=Decimal("20000000"),
            bedrooms=5,
            is_full_cash=True,
        )
        await property_factory.create(title="Coast chalet", project_name="Marassi", developer_name="Emaar Misr")
        repo = PropertyRepository(db_session)

        async def titles(**filters):
            properties, _ = await repo.search_properties(PropertySearchFilters(**filters))
            return sorted(p.title for p in properties)

        assert await titles(location="cairo") == ["Cairo apartment"]
        assert await titles(search_text="villa") == ["Dubai villa"]
        assert await titles(property_type=PropertyType.APARTMENT) == ["Cairo apartment"]
        assert await titles(listing_type=ListingType.RESALE) == ["Cairo apartment"]
        assert await titles(min_price=Decimal("5000000"), max_price=Decimal("10000000")) == ["Coast chalet"]
        assert await titles(min_bedrooms=3) == ["Cairo apartment", "Dubai villa"]
        assert await titles(is_full_cash=True) == ["Dubai villa"]
        assert await titles(has_installments=True) == ["Cairo apartment"]
        assert await titles(has_installments=False) == ["Coast chalet", "Dubai villa"]
        assert await titles(international=True) == ["Dubai villa"]
        assert await titles(international=False) == ["Cairo apartment", "Coast chalet"]
        assert await titles(project_name="marassi") == ["Coast chalet"]
        assert await titles(developer_name="emaar") == ["Coast chalet"]

    async def test_default_order_puts_featured_first(self, db_session, property_factory):
        await property_factory.create(title="Featured", is_featured=True)
        await property_factory.create(title="Newest")
        repo = PropertyRepository(db_session)

        properties, _ = await repo.search_properties(PropertySearchFilters())
        assert [p.title for p in properties] == ["Featured", "Newest"]

        properties, _ = await repo.search_properties(PropertySearchFilters(), order_by="price", order_direction="asc")
        assert len(properties) == 2

    async def test_pagination(self, db_session, property_factory):
        for i in range(5):
            await property_factory.create(title=f"Listing {i}")
        repo = PropertyRepository(db_session)

        properties, total = await repo.search_properties(PropertySearchFilters(), skip=4, limit=2)

        assert total == 5
        assert len(properties) == 1

    async def test_flagged_and_new_listings(self, db_session, property_factory):
        await property_factory.create(title="Highlighted", is_highlighted=True)
        await property_factory.create(title="Hidden highlighted", is_highlighted=True, status=PropertyStatus.PENDING)
        old = await property_factory.create(title="Old listing")
        await property_factory.create(title="Old but flagged new", is_new_listing=True)
        repo = PropertyRepository(db_session)

        highlighted = await repo.get_flagged_properties("is_highlighted")
        assert [p.title for p in highlighted] == ["Highlighted"]

        with pytest.raises(ValueError):
            await repo.get_flagged_properties("views")

        future = datetime.now(timezone.utc) + timedelta(days=1)
        new_listings = await repo.get_new_listings(since=future)
        assert [p.title for p in new_listings] == ["Old but flagged new"]

        recent = await repo.get_new_listings(since=datetime.now(timezone.utc) - timedelta(days=1))
        assert old.id in [p.id for p in recent]

    async def test_distinct_values(self, db_session, property_factory):
        await property_factory.create(city="Cairo", project_name="Mivida")
        await property_factory.create(city="Cairo")
        await property_factory.create(city="Alexandria", project_name="")
        repo = PropertyRepository(db_session)

        assert await repo.get_distinct_values("city") == ["Alexandria", "Cairo"]
        assert await repo.get_distinct_values("project_name") == ["Mivida"]

    async def test_increment_views(self, db_session, property_factory):
        prop = await property_factory.create()
        repo = PropertyRepository(db_session)

        await repo.increment_views(prop)
        await repo.increment_views(prop)

        assert prop.views == 2


class TestAnnouncementRepository:

    async def test_visible_window(self, db_session):
        repo = AnnouncementRepository(db_session)
        now = datetime.now(timezone.utc)
        await repo.create({"title": "Open", "content": "x"})
        await repo.create({"title": "Running", "content": "x", "start_date": now - timedelta(days=1),
                           "end_date": now + timedelta(days=1)})
        await repo.create({"title": "Future", "content": "x", "start_date": now + timedelta(days=1)})
        await repo.create({"title": "Expired", "content": "x", "end_date": now - timedelta(days=1)})
        await repo.create({"title": "Inactive", "content": "x", "is_active": False})
        await repo.create({"title": "Featured", "content": "x", "is_featured": True, "is_highlighted": True})

        visible = await repo.get_visible()
        assert visible[0].title == "Featured"
        assert sorted(a.title for a in visible) == ["Featured", "Open", "Running"]

        highlighted = await repo.get_visible(highlighted_only=True)
        assert [a.title for a in highlighted] == ["Featured"]


class TestSiteSettingsRepository:

    async def test_get_or_create_is_a_singleton(self, db_session):
        repo = SiteSettingsRepository(db_session)

        first = await repo.get_or_create()
        second = await repo.get_or_create()

        assert first.id == second.id
        assert first.company_name == "Property Showcase"
        assert await repo.count() == 1

    async def test_merge_update_can_clear_optional_fields(self, db_session):
        repo = SiteSettingsRepository(db_session)
        await repo.merge_update({"facebook_url": "https://facebook.com/showcase"})

        updated = await repo.merge_update({"facebook_url": None, "company_name": "Nile Homes"})

        assert updated.facebook_url is None
        assert updated.company_name == "Nile Homes"
        assert updated.contact_email == "info@example.com"
