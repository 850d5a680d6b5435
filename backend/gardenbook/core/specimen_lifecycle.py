"""Specimen lifecycle: keeps a specimen row consistent with its stored assets.

Invariants:
    - image_url/image_public_id and qr_code_url/qr_public_id are written as pairs
    - No row is written when the photo upload fails
    - Returned specimens are always re-read from the repository
    - On delete the row goes last, so its handles survive a crash mid-cleanup
    - Asset destroy failures are logged, never raised

Scan code failures after the insert follow ``ScanCodePolicy``; the same policy
applies to every specimen kind.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from gardenbook.core.audit import log_change
from gardenbook.core.domain_types import (
    AssetRef,
    CreateOutcome,
    Specimen,
    SpecimenFields,
    SpecimenKind,
    SpecimenPatch,
    StagedImage,
    image_columns,
    scan_code_columns,
)
from gardenbook.core.errors import (
    AssetUploadFailedError,
    CatalogError,
    DependencyError,
    ResourceNotFoundError,
    ValidationError,
)
from gardenbook.core.repository_protocols import (
    AssetStore,
    CatalogRepository,
    ScanCodeEncoder,
    call_repository,
)

logger = logging.getLogger("gardenbook.lifecycle")

DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024
DEFAULT_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


class ScanCodePolicy(str, Enum):
    """What create does when the scan code cannot be attached to a new row."""
    ROLLBACK = "rollback"
    DEGRADE = "degrade"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SpecimenLifecycle:
    """Create, update and delete plants and fish together with their assets."""

    def __init__(
        self,
        repository: CatalogRepository,
        assets: AssetStore,
        encoder: ScanCodeEncoder,
        frontend_base_url: str,
        asset_root: str = "mygardenbook",
        scan_code_policy: ScanCodePolicy = ScanCodePolicy.ROLLBACK,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
        accepted_image_types: frozenset[str] = DEFAULT_IMAGE_TYPES,
    ):
        self._repository = repository
        self._assets = assets
        self._encoder = encoder
        self._frontend_base_url = frontend_base_url.rstrip("/")
        self._asset_root = asset_root.strip("/")
        self._policy = ScanCodePolicy(scan_code_policy)
        self._max_image_bytes = max_image_bytes
        self._accepted_image_types = frozenset(accepted_image_types)

    # ─── Reads ──────────────────────────────────────────────────

    async def get(self, kind: SpecimenKind, specimen_id: int) -> Specimen:
        return await self._load(kind, specimen_id)

    async def list_all(self, kind: SpecimenKind) -> list[Specimen]:
        """All specimens of one kind, newest first."""
        rows = await call_repository(
            "select", self._repository.select(kind.table, descending=True),
        )
        return [self._to_specimen(kind, row) for row in rows]

    def scan_target_url(self, kind: SpecimenKind, specimen_id: int) -> str:
        """Public detail page a specimen's scan code points at."""
        return f"{self._frontend_base_url}/{kind.view_page}?id={specimen_id}"

    # ─── Mutations ──────────────────────────────────────────────

    async def create(
        self,
        admin_id: int,
        kind: SpecimenKind,
        fields: SpecimenFields,
        image: StagedImage | None = None,
    ) -> CreateOutcome:
        fields = fields.normalized()
        if not fields.name:
            raise ValidationError(f"{kind.label} name required", "name")
        if image is not None:
            self._check_image(image)

        image_ref = None
        if image is not None:
            image_ref = await self._upload(
                image.path, self._image_folder(kind), image.content_type,
            )

        row = {
            "name": fields.name,
            "scientific_name": fields.scientific_name,
            "category": fields.category,
            "description": fields.description,
            **image_columns(image_ref),
            **scan_code_columns(None),
            "updated_at": _now(),
        }
        try:
            inserted = await call_repository("insert", self._repository.insert(kind.table, row))
        except CatalogError:
            await self._discard(image_ref, "insert failed")
            raise
        specimen_id = inserted["id"]

        warning = None
        try:
            await self._attach_scan_code(kind, specimen_id)
        except CatalogError as exc:
            if self._policy is ScanCodePolicy.ROLLBACK:
                await self._roll_back_create(kind, specimen_id, image_ref)
                raise
            logger.warning(
                "Scan code generation failed, keeping %s %s without one: %s",
                kind.value, specimen_id, exc.message,
                extra={"specimen_kind": kind.value, "specimen_id": specimen_id},
            )
            warning = f"Scan code generation failed: {exc.message}"

        specimen = await self._load(kind, specimen_id)
        logger.info(
            "Created %s %s", kind.value, specimen_id,
            extra={"specimen_kind": kind.value, "specimen_id": specimen_id, "admin_id": admin_id},
        )
        await log_change(
            self._repository, admin_id, kind.value, specimen_id, "CREATE",
            None, specimen.to_row(),
        )
        return CreateOutcome(specimen=specimen, warning=warning)

    async def update(
        self,
        admin_id: int,
        kind: SpecimenKind,
        specimen_id: int,
        patch: SpecimenPatch,
        image: StagedImage | None = None,
    ) -> Specimen:
        changes = patch.changes()
        if "name" in changes and not changes["name"]:
            raise ValidationError(f"{kind.label} name must not be empty", "name")
        if image is not None:
            self._check_image(image)

        before = await self._load(kind, specimen_id)

        image_ref = None
        if image is not None:
            # The superseded image stays in the asset store.
            image_ref = await self._upload(
                image.path, self._image_folder(kind), image.content_type,
            )
            changes.update(image_columns(image_ref))
        changes["updated_at"] = _now()

        try:
            written = await call_repository(
                "update", self._repository.update(kind.table, specimen_id, changes),
            )
        except CatalogError:
            await self._discard(image_ref, "update failed")
            raise
        if written is None:
            await self._discard(image_ref, "row vanished")
            raise ResourceNotFoundError(kind.label, specimen_id)

        after = await self._load(kind, specimen_id)
        logger.info(
            "Updated %s %s (%s)", kind.value, specimen_id, ", ".join(sorted(changes)),
            extra={"specimen_kind": kind.value, "specimen_id": specimen_id, "admin_id": admin_id},
        )
        await log_change(
            self._repository, admin_id, kind.value, specimen_id, "UPDATE",
            before.to_row(), after.to_row(),
        )
        return after

    async def delete(self, admin_id: int, kind: SpecimenKind, specimen_id: int) -> None:
        specimen = await self._load(kind, specimen_id)

        await self._discard(specimen.image, "specimen deleted")
        await self._discard(specimen.scan_code, "specimen deleted")
        await call_repository("delete", self._repository.delete(kind.table, specimen_id))

        logger.info(
            "Deleted %s %s", kind.value, specimen_id,
            extra={"specimen_kind": kind.value, "specimen_id": specimen_id, "admin_id": admin_id},
        )
        await log_change(
            self._repository, admin_id, kind.value, specimen_id, "DELETE",
            specimen.to_row(), None,
        )

    async def regenerate_scan_code(
        self, admin_id: int, kind: SpecimenKind, specimen_id: int,
    ) -> Specimen:
        """Attach a fresh scan code, e.g. to a record created in degraded mode."""
        before = await self._load(kind, specimen_id)
        previous = before.scan_code

        fresh = await self._attach_scan_code(
            kind, specimen_id, keep=previous.public_id if previous else None,
        )
        if previous is not None and previous.public_id != fresh.public_id:
            await self._discard(previous, "scan code replaced")

        after = await self._load(kind, specimen_id)
        logger.info(
            "Regenerated scan code for %s %s", kind.value, specimen_id,
            extra={"specimen_kind": kind.value, "specimen_id": specimen_id, "admin_id": admin_id},
        )
        await log_change(
            self._repository, admin_id, kind.value, specimen_id, "REGENERATE_SCAN_CODE",
            before.to_row(), after.to_row(),
        )
        return after

    # ─── Steps ──────────────────────────────────────────────────

    async def _attach_scan_code(
        self, kind: SpecimenKind, specimen_id: int, keep: str | None = None,
    ) -> AssetRef:
        """Encode, upload and record the scan code pair for one row.

        An uploaded asset whose pair could not be written is destroyed unless
        its handle is ``keep`` (the handle the row already points at).
        """
        target = self.scan_target_url(kind, specimen_id)
        try:
            png = await asyncio.to_thread(self._encoder.encode, target)
        except Exception as exc:
            logger.error("Scan code encoding failed for %s", target, exc_info=True)
            raise DependencyError(str(exc), "scan code encoding") from exc

        ref = await self._upload(
            png, self._scan_code_folder(), "image/png",
            public_id=f"{kind.value}-{specimen_id}",
        )
        patch = {**scan_code_columns(ref), "updated_at": _now()}
        try:
            written = await call_repository(
                "update", self._repository.update(kind.table, specimen_id, patch),
            )
        except CatalogError:
            if ref.public_id != keep:
                await self._discard(ref, "scan code not recorded")
            raise
        if written is None:
            await self._discard(ref, "row vanished")
            raise ResourceNotFoundError(kind.label, specimen_id)
        return ref

    async def _roll_back_create(
        self, kind: SpecimenKind, specimen_id: int, image_ref: AssetRef | None,
    ) -> None:
        try:
            await self._repository.delete(kind.table, specimen_id)
        except Exception:
            logger.error(
                "Rollback could not delete %s %s", kind.value, specimen_id,
                exc_info=True,
                extra={"specimen_kind": kind.value, "specimen_id": specimen_id},
            )
            return
        await self._discard(image_ref, "create rolled back")
        logger.info(
            "Rolled back %s %s after scan code failure", kind.value, specimen_id,
            extra={"specimen_kind": kind.value, "specimen_id": specimen_id},
        )

    async def _upload(
        self,
        source: bytes | Path,
        folder: str,
        content_type: str,
        public_id: str | None = None,
    ) -> AssetRef:
        try:
            return await self._assets.upload(source, folder, content_type, public_id=public_id)
        except Exception as exc:
            logger.error("Asset upload to %s failed", folder, exc_info=True)
            raise AssetUploadFailedError(folder) from exc

    async def _discard(self, ref: AssetRef | None, reason: str) -> None:
        if ref is None:
            return
        try:
            await self._assets.destroy(ref.public_id)
        except Exception:
            logger.warning(
                "Could not destroy asset %s (%s)", ref.public_id, reason,
                exc_info=True,
            )

    async def _load(self, kind: SpecimenKind, specimen_id: int) -> Specimen:
        row = await call_repository("read", self._repository.get(kind.table, specimen_id))
        if row is None:
            raise ResourceNotFoundError(kind.label, specimen_id)
        return self._to_specimen(kind, row)

    @staticmethod
    def _to_specimen(kind: SpecimenKind, row: dict[str, Any]) -> Specimen:
        try:
            return Specimen.from_row(kind, row)
        except ValueError as exc:
            raise DependencyError(str(exc), "catalog read") from exc

    def _check_image(self, image: StagedImage) -> None:
        if image.size > self._max_image_bytes:
            raise ValidationError(
                f"Image exceeds {self._max_image_bytes} bytes", "image",
            )
        if image.content_type not in self._accepted_image_types:
            raise ValidationError(
                f"Unsupported image type '{image.content_type}'", "image",
            )

    def _image_folder(self, kind: SpecimenKind) -> str:
        return f"{self._asset_root}/{kind.table.value}"

    def _scan_code_folder(self) -> str:
        return f"{self._asset_root}/qr"
