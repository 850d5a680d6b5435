"""Category API endpoints."""
from typing import List

from fastapi import APIRouter, Depends

from gardenbook.core.category_guard import CategoryGuard
from gardenbook.core.domain_types import AdminIdentity
from gardenbook.dependencies import get_category_guard, require_admin
from gardenbook.schemas import CategoryCreate, CategoryResponse, SuccessResponse

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories(guard: CategoryGuard = Depends(get_category_guard)):
    """List all categories by name (public)."""
    return await guard.list_all()


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    admin: AdminIdentity = Depends(require_admin),
    guard: CategoryGuard = Depends(get_category_guard),
):
    """Create a category; names are unique ignoring case (admin)."""
    return await guard.create(admin.id, data.name, data.type)


@router.delete("/{category_id}", response_model=SuccessResponse)
async def delete_category(
    category_id: int,
    admin: AdminIdentity = Depends(require_admin),
    guard: CategoryGuard = Depends(get_category_guard),
):
    """Delete a category no plant or fish refers to (admin)."""
    await guard.delete(admin.id, category_id)
    return SuccessResponse()
