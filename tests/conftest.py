"""
Test configuration and fixtures for the property showcase API.
Provides database fixtures, test data factories, media directories and an API client.
"""

import os
import tempfile

# Settings are read at import time, so the environment is prepared first
_MEDIA_ROOT = tempfile.mkdtemp(prefix="showcase-tests-")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["UPLOADS_ROOT"] = os.path.join(_MEDIA_ROOT, "uploads")
os.environ["IMAGES_DIR"] = os.path.join(_MEDIA_ROOT, "images")
os.environ["ASSETS_DIR"] = os.path.join(_MEDIA_ROOT, "assets")
os.environ["PHOTO_BACKUP_DIR"] = os.path.join(_MEDIA_ROOT, "backups")

import io
import uuid
from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.datastructures import Headers, UploadFile

import showcase.models  # noqa: F401
from showcase.config import settings
from showcase.database import Base, get_db
from showcase.main import app
from showcase.models.property import Property, PropertyType
from showcase.models.user import User, UserRole
from showcase.repositories.property import PropertyRepository
from showcase.repositories.user import UserRepository
from showcase.utils.auth import create_access_token

TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def media_dirs(tmp_path: Path, monkeypatch) -> Dict[str, Path]:
    """Point every media directory at a per-test temporary tree."""
    dirs = {
        "uploads_root": tmp_path / "uploads",
        "images_dir": tmp_path / "images",
        "assets_dir": tmp_path / "assets",
        "photo_backup_dir": tmp_path / "backups",
    }
    for name, path in dirs.items():
        path.mkdir(parents=True, exist_ok=True)
        monkeypatch.setattr(settings, name, str(path))

    dirs["photos"] = settings.property_photos_dir
    dirs["photos"].mkdir(parents=True, exist_ok=True)
    return dirs


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async API client whose requests share the test session."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as api_client:
        yield api_client
    app.dependency_overrides.clear()


# Test data factories
class UserFactory:
    """Creates users through the repository so passwords are hashed."""

    def __init__(self, db_session: AsyncSession):
        self.repo = UserRepository(db_session)

    async def create(
        self,
        username: str = None,
        email: str = None,
        password: str = TEST_PASSWORD,
        role: UserRole = UserRole.USER,
        is_active: bool = True
    ) -> User:
        suffix = uuid.uuid4().hex[:8]
        return await self.repo.create_user({
            "username": username or f"user_{suffix}",
            "email": email or f"user_{suffix}@example.com",
            "password": password,
            "role": role,
            "is_active": is_active,
        })


class PropertyFactory:
    """Creates properties with sensible defaults; keyword arguments override them."""

    def __init__(self, db_session: AsyncSession):
        self.repo = PropertyRepository(db_session)

    @staticmethod
    def property_data(**overrides) -> dict:
        data = {
            "title": "Sea view chalet",
            "description": "Two bedroom chalet a short walk from the beach",
            "address": "Marassi, North Coast",
            "city": "North Coast",
            "country": "Egypt",
            "property_type": PropertyType.CHALET,
            "price": Decimal("8500000.00"),
            "bedrooms": 2,
            "bathrooms": 2,
            "images": [],
        }
        data.update(overrides)
        return data

    async def create(self, **overrides) -> Property:
        return await self.repo.create_property(self.property_data(**overrides))


@pytest.fixture
def user_factory(db_session: AsyncSession) -> UserFactory:
    return UserFactory(db_session)


@pytest.fixture
def property_factory(db_session: AsyncSession) -> PropertyFactory:
    return PropertyFactory(db_session)


@pytest.fixture
async def owner_user(user_factory: UserFactory) -> User:
    return await user_factory.create(username="owner", email="owner@example.com", role=UserRole.OWNER)


@pytest.fixture
async def admin_user(user_factory: UserFactory) -> User:
    return await user_factory.create(username="admin", email="admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
async def regular_user(user_factory: UserFactory) -> User:
    return await user_factory.create(username="visitor", email="visitor@example.com", role=UserRole.USER)


def _auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user.id, user.username, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return _auth_headers


@pytest.fixture
def owner_headers(owner_user: User) -> Dict[str, str]:
    return _auth_headers(owner_user)


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return _auth_headers(admin_user)


@pytest.fixture
def user_headers(regular_user: User) -> Dict[str, str]:
    return _auth_headers(regular_user)


# Image helpers
def _image_bytes(fmt: str = "JPEG", size=(64, 48), color=(200, 80, 40)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def _upload(filename: str, content: bytes, content_type: str = "image/jpeg") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type})
    )


def _write_image(directory: Path, filename: str, fmt: str = "JPEG") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_bytes(_image_bytes(fmt))
    return path


@pytest.fixture
def make_image_bytes():
    return _image_bytes


@pytest.fixture
def make_upload():
    return _upload


@pytest.fixture
def write_image():
    return _write_image


@pytest.fixture
def image_bytes() -> bytes:
    return _image_bytes()
