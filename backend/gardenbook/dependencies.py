"""FastAPI dependencies wiring the core to its concrete collaborators.

Tests replace the leaf providers (repository, asset store, encoder) through
``app.dependency_overrides``; everything above them is rebuilt per request.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gardenbook.auth import JwtAdminGate
from gardenbook.config import Settings, get_settings
from gardenbook.core.category_guard import CategoryGuard
from gardenbook.core.domain_types import AdminIdentity
from gardenbook.core.repository_protocols import AdminGate, AssetStore, CatalogRepository, ScanCodeEncoder
from gardenbook.core.specimen_lifecycle import ScanCodePolicy, SpecimenLifecycle
from gardenbook.database import get_session_factory
from gardenbook.repository import SqlCatalogRepository
from gardenbook.scan_codes import QrScanCodeEncoder
from gardenbook.storage import S3AssetStore

security = HTTPBearer(auto_error=False)


def get_catalog_repository() -> CatalogRepository:
    return SqlCatalogRepository(get_session_factory())


def get_asset_store(settings: Settings = Depends(get_settings)) -> AssetStore:
    return S3AssetStore.from_settings(settings)


def get_scan_code_encoder() -> ScanCodeEncoder:
    return QrScanCodeEncoder()


def get_admin_gate(
    repository: CatalogRepository = Depends(get_catalog_repository),
    settings: Settings = Depends(get_settings),
) -> AdminGate:
    return JwtAdminGate(repository, settings.jwt_secret_key)


def get_specimen_lifecycle(
    repository: CatalogRepository = Depends(get_catalog_repository),
    assets: AssetStore = Depends(get_asset_store),
    encoder: ScanCodeEncoder = Depends(get_scan_code_encoder),
    settings: Settings = Depends(get_settings),
) -> SpecimenLifecycle:
    return SpecimenLifecycle(
        repository,
        assets,
        encoder,
        frontend_base_url=settings.frontend_base_url,
        asset_root=settings.asset_root,
        scan_code_policy=ScanCodePolicy(settings.scan_code_failure_policy),
        max_image_bytes=settings.max_image_bytes,
        accepted_image_types=frozenset(settings.accepted_image_types),
    )


def get_category_guard(
    repository: CatalogRepository = Depends(get_catalog_repository),
) -> CategoryGuard:
    return CategoryGuard(repository)


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    gate: AdminGate = Depends(get_admin_gate),
) -> AdminIdentity:
    return await gate.authenticate(credentials.credentials if credentials else None)
