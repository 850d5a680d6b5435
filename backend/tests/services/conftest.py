"""Fixtures for HTTP and SQL tests: in-memory SQLite, app overrides, tokens."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import gardenbook.models  # noqa: F401  (registers tables on Base.metadata)
from gardenbook.auth import create_access_token, hash_password
from gardenbook.config import Settings, get_settings
from gardenbook.core.domain_types import Table
from gardenbook.database import Base
from gardenbook.dependencies import get_asset_store, get_catalog_repository, get_scan_code_encoder
from gardenbook.main import app
from gardenbook.repository import SqlCatalogRepository
from gardenbook.routers.auth import limiter

TEST_SECRET = "service-test-secret-service-test-secret-00"
ADMIN_PASSWORD = "correct horse battery"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sql_repository(engine):
    return SqlCatalogRepository(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret_key=TEST_SECRET,
        frontend_base_url="https://front.test",
        upload_tmp_dir=str(tmp_path),
        max_image_bytes=1024,
    )


@pytest.fixture
async def users(sql_repository):
    """One admin, one viewer; returns their ids by role."""
    admin = await sql_repository.insert(Table.USERS, {
        "email": "admin@garden.test",
        "password_hash": hash_password(ADMIN_PASSWORD),
        "role": "admin",
        "is_active": True,
    })
    viewer = await sql_repository.insert(Table.USERS, {
        "email": "viewer@garden.test",
        "password_hash": hash_password("viewer password"),
        "role": "viewer",
        "is_active": True,
    })
    return {"admin": admin["id"], "viewer": viewer["id"]}


@pytest.fixture
def admin_headers(users, settings):
    token = create_access_token(users["admin"], settings.jwt_secret_key, 5)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def viewer_headers(users, settings):
    token = create_access_token(users["viewer"], settings.jwt_secret_key, 5)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(sql_repository, assets, encoder, settings):
    app.dependency_overrides[get_catalog_repository] = lambda: sql_repository
    app.dependency_overrides[get_asset_store] = lambda: assets
    app.dependency_overrides[get_scan_code_encoder] = lambda: encoder
    app.dependency_overrides[get_settings] = lambda: settings
    limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD
