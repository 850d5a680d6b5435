"""Plant and fish endpoints. One router per specimen kind, same shape."""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from gardenbook.config import Settings, get_settings
from gardenbook.core.domain_types import AdminIdentity, SpecimenFields, SpecimenKind, SpecimenPatch, Table
from gardenbook.core.repository_protocols import CatalogRepository, call_repository
from gardenbook.core.specimen_lifecycle import SpecimenLifecycle
from gardenbook.dependencies import get_catalog_repository, get_specimen_lifecycle, require_admin
from gardenbook.schemas import (
    AuditEntryResponse,
    SpecimenCreatedResponse,
    SpecimenResponse,
    SpecimenUpdatedResponse,
    SuccessResponse,
)
from gardenbook.uploads import staged_image

PATCH_FIELDS = ("name", "scientific_name", "category", "description")


def patch_from_form(form) -> SpecimenPatch:
    """Only fields present in the form end up in the patch; blank values clear."""
    values = {}
    for key in PATCH_FIELDS:
        if key in form and isinstance(form[key], str):
            values[key] = form[key]
    return SpecimenPatch(**values)


def build_router(kind: SpecimenKind, prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[kind.table.value])

    @router.get("", response_model=List[SpecimenResponse])
    async def list_specimens(lifecycle: SpecimenLifecycle = Depends(get_specimen_lifecycle)):
        """List all specimens, newest first (public)."""
        specimens = await lifecycle.list_all(kind)
        return [SpecimenResponse.from_specimen(s) for s in specimens]

    @router.get("/{specimen_id}", response_model=SpecimenResponse)
    async def get_specimen(
        specimen_id: int,
        response: Response,
        lifecycle: SpecimenLifecycle = Depends(get_specimen_lifecycle),
    ):
        """Get a single specimen (public). Never cached: the scan code page reads it."""
        specimen = await lifecycle.get(kind, specimen_id)
        response.headers["Cache-Control"] = "no-store"
        return SpecimenResponse.from_specimen(specimen)

    @router.post("", response_model=SpecimenCreatedResponse, status_code=201)
    async def create_specimen(
        name: str = Form(""),
        scientific_name: Optional[str] = Form(None),
        category: Optional[str] = Form(None),
        description: Optional[str] = Form(None),
        image: Optional[UploadFile] = File(None),
        admin: AdminIdentity = Depends(require_admin),
        lifecycle: SpecimenLifecycle = Depends(get_specimen_lifecycle),
        settings: Settings = Depends(get_settings),
    ):
        """Register a specimen with optional photo; a scan code is attached (admin)."""
        fields = SpecimenFields(
            name=name,
            scientific_name=scientific_name,
            category=category,
            description=description,
        )
        async with staged_image(image, settings.max_image_bytes, settings.upload_tmp_dir) as staged:
            outcome = await lifecycle.create(admin.id, kind, fields, staged)
        return SpecimenCreatedResponse(
            specimen=SpecimenResponse.from_specimen(outcome.specimen),
            warning=outcome.warning,
        )

    @router.put("/{specimen_id}", response_model=SpecimenUpdatedResponse)
    async def update_specimen(
        specimen_id: int,
        request: Request,
        admin: AdminIdentity = Depends(require_admin),
        lifecycle: SpecimenLifecycle = Depends(get_specimen_lifecycle),
        settings: Settings = Depends(get_settings),
    ):
        """Partially update a specimen, optionally replacing its photo (admin)."""
        form = await request.form()
        patch = patch_from_form(form)
        image = form.get("image")
        if not isinstance(image, StarletteUploadFile):
            image = None
        async with staged_image(image, settings.max_image_bytes, settings.upload_tmp_dir) as staged:
            specimen = await lifecycle.update(admin.id, kind, specimen_id, patch, staged)
        return SpecimenUpdatedResponse(specimen=SpecimenResponse.from_specimen(specimen))

    @router.delete("/{specimen_id}", response_model=SuccessResponse)
    async def delete_specimen(
        specimen_id: int,
        admin: AdminIdentity = Depends(require_admin),
        lifecycle: SpecimenLifecycle = Depends(get_specimen_lifecycle),
    ):
        """Delete a specimen together with its photo and scan code (admin)."""
        await lifecycle.delete(admin.id, kind, specimen_id)
        return SuccessResponse()

    @router.post("/{specimen_id}/scan-code", response_model=SpecimenUpdatedResponse)
    async def regenerate_scan_code(
        specimen_id: int,
        admin: AdminIdentity = Depends(require_admin),
        lifecycle: SpecimenLifecycle = Depends(get_specimen_lifecycle),
    ):
        """Re-create the scan code of a specimen (admin)."""
        specimen = await lifecycle.regenerate_scan_code(admin.id, kind, specimen_id)
        return SpecimenUpdatedResponse(specimen=SpecimenResponse.from_specimen(specimen))

    @router.get("/{specimen_id}/history", response_model=List[AuditEntryResponse])
    async def get_specimen_history(
        specimen_id: int,
        limit: int = Query(default=50, ge=1, le=200),
        _admin: AdminIdentity = Depends(require_admin),
        repository: CatalogRepository = Depends(get_catalog_repository),
    ):
        """Audit history of a specimen, newest first (admin)."""
        return await call_repository(
            "select",
            repository.select(
                Table.AUDIT_LOG,
                where={"entity_type": kind.value, "entity_id": specimen_id},
                order_by="id",
                descending=True,
                limit=limit,
            ),
        )

    return router


plants_router = build_router(SpecimenKind.PLANT, "/api/plants")
fish_router = build_router(SpecimenKind.FISH, "/api/fish")
