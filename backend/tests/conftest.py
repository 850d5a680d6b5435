"""Root conftest: environment defaults and in-memory collaborator fixtures."""

import os

import pytest

# Keep tests away from real credentials and services
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-test-secret-key-0123456789")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("S3_ACCESS_KEY_ID", "test")
os.environ.setdefault("S3_SECRET_ACCESS_KEY", "test")

from gardenbook.core.category_guard import CategoryGuard  # noqa: E402
from gardenbook.core.domain_types import StagedImage  # noqa: E402
from gardenbook.core.specimen_lifecycle import ScanCodePolicy  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeAssetStore,
    FakeScanCodeEncoder,
    InMemoryCatalogRepository,
    make_lifecycle,
)


@pytest.fixture
def repository():
    return InMemoryCatalogRepository()


@pytest.fixture
def assets():
    return FakeAssetStore()


@pytest.fixture
def encoder():
    return FakeScanCodeEncoder()


@pytest.fixture
def lifecycle(repository, assets, encoder):
    return make_lifecycle(repository, assets, encoder)


@pytest.fixture
def degrading_lifecycle(repository, assets, encoder):
    return make_lifecycle(repository, assets, encoder, policy=ScanCodePolicy.DEGRADE)


@pytest.fixture
def guard(repository):
    return CategoryGuard(repository)


@pytest.fixture
def staged_png(tmp_path):
    """A small PNG already staged on disk."""
    path = tmp_path / "fern.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"0" * 64)
    return StagedImage(path=path, content_type="image/png", size=path.stat().st_size, filename="fern.png")
