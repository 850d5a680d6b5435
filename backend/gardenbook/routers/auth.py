"""Authentication API endpoints."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from gardenbook.auth import create_access_token, verify_password
from gardenbook.config import Settings, get_settings
from gardenbook.core.domain_types import AdminIdentity, Table
from gardenbook.core.repository_protocols import CatalogRepository, call_repository
from gardenbook.dependencies import get_catalog_repository, require_admin
from gardenbook.schemas import AdminResponse, LoginRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])
limiter = Limiter(key_func=get_remote_address)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(get_settings().login_rate_limit)
async def login(
    request: Request,
    data: LoginRequest,
    repository: CatalogRepository = Depends(get_catalog_repository),
    settings: Settings = Depends(get_settings),
):
    """Login and get access token."""
    users = await call_repository(
        "select", repository.select(Table.USERS, where={"email": data.email.strip().lower()}, limit=1),
    )
    user = users[0] if users else None

    if not user or not verify_password(data.password, user["password_hash"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not user["is_active"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account disabled"
        )

    await call_repository(
        "update", repository.update(Table.USERS, user["id"], {"last_login": datetime.now(timezone.utc)}),
    )
    token = create_access_token(user["id"], settings.jwt_secret_key, settings.jwt_access_expire_minutes)
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=AdminResponse)
async def get_me(admin: AdminIdentity = Depends(require_admin)):
    """Get the authenticated admin."""
    return admin
