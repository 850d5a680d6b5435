"""Category guard: categories are only removed when nothing references them.

Specimens point at categories by name (string equality, no foreign key), so
the reference check lives here and nowhere else. Check-then-delete is not
atomic; a specimen created with the name in between is not detected.
"""

import logging

from gardenbook.core.audit import log_change
from gardenbook.core.domain_types import Category, SpecimenKind, Table, category_key, clean_text
from gardenbook.core.errors import (
    CategoryExistsError,
    CategoryInUseError,
    ResourceNotFoundError,
    ValidationError,
)
from gardenbook.core.repository_protocols import (
    CatalogRepository,
    DuplicateRowError,
    call_repository,
)

logger = logging.getLogger("gardenbook.categories")


class CategoryGuard:

    def __init__(self, repository: CatalogRepository):
        self._repository = repository

    async def list_all(self) -> list[Category]:
        rows = await call_repository("select", self._repository.select(Table.CATEGORIES, order_by="name"))
        return [Category.from_row(row) for row in rows]

    async def usage(self, name: str) -> dict[SpecimenKind, int]:
        """Number of specimens of each kind filed under ``name``."""
        counts = {}
        for kind in SpecimenKind:
            counts[kind] = await call_repository(
                "count", self._repository.count_where(kind.table, "category", name),
            )
        return counts

    async def create(self, admin_id: int, name: str, type: str | None = None) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name required", "name")
        key = category_key(name)

        existing = await call_repository(
            "lookup", self._repository.select(Table.CATEGORIES, where={"name_key": key}, limit=1),
        )
        if existing:
            raise CategoryExistsError(name)

        row = await call_repository(
            "insert",
            self._insert({"name": name, "name_key": key, "type": clean_text(type)}),
        )

        category = Category.from_row(row)
        logger.info("Created category %r", name, extra={"admin_id": admin_id})
        await log_change(
            self._repository, admin_id, "category", category.id, "CREATE",
            None, dict(row),
        )
        return category

    async def _insert(self, row: dict) -> dict:
        try:
            return await self._repository.insert(Table.CATEGORIES, row)
        except DuplicateRowError as exc:
            # Lost a race with a concurrent create of the same name.
            raise CategoryExistsError(row["name"]) from exc

    async def delete(self, admin_id: int, category_id: int) -> None:
        row = await call_repository("read", self._repository.get(Table.CATEGORIES, category_id))
        if row is None:
            raise ResourceNotFoundError("Category", category_id)
        category = Category.from_row(row)

        counts = await self.usage(category.name)
        if any(counts.values()):
            raise CategoryInUseError(
                category.name,
                plants=counts[SpecimenKind.PLANT],
                fish=counts[SpecimenKind.FISH],
            )

        await call_repository("delete", self._repository.delete(Table.CATEGORIES, category_id))
        logger.info("Deleted category %r", category.name, extra={"admin_id": admin_id})
        await log_change(
            self._repository, admin_id, "category", category_id, "DELETE",
            dict(row), None,
        )
