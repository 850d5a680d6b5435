"""In-memory stand-ins for the catalog store, asset store and encoder.

Failures are injected per operation so tests can break any single step of a
lifecycle sequence.
"""

from copy import deepcopy
from pathlib import Path
from typing import Any, Callable

from gardenbook.core.domain_types import AssetRef, Table
from gardenbook.core.specimen_lifecycle import ScanCodePolicy, SpecimenLifecycle


class StoreDown(RuntimeError):
    """Generic collaborator failure used by tests."""


class InMemoryCatalogRepository:
    def __init__(self):
        self.tables: dict[Table, dict[int, dict]] = {table: {} for table in Table}
        self._next_id: dict[Table, int] = {table: 1 for table in Table}
        self._rules: list[tuple[str, Table | None, Exception, Callable[[Any], bool] | None]] = []
        self.calls: list[tuple[str, Table]] = []

    # ── failure injection ──
    def fail(
        self,
        operation: str,
        table: Table | None = None,
        exc: Exception | None = None,
        when: Callable[[Any], bool] | None = None,
    ) -> None:
        self._rules.append((operation, table, exc or StoreDown(f"{operation} failed"), when))

    def _maybe_fail(self, operation: str, table: Table, payload: Any = None) -> None:
        self.calls.append((operation, table))
        for op, tbl, exc, when in self._rules:
            if op == operation and tbl in (None, table) and (when is None or when(payload)):
                raise exc

    # ── helpers ──
    def seed(self, table: Table, **row) -> dict:
        row_id = row.pop("id", None) or self._next_id[table]
        self._next_id[table] = max(self._next_id[table], row_id + 1)
        self.tables[table][row_id] = {"id": row_id, **row}
        return deepcopy(self.tables[table][row_id])

    def rows(self, table: Table) -> list[dict]:
        return [deepcopy(row) for row in self.tables[table].values()]

    # ── CatalogRepository ──
    async def insert(self, table: Table, row: dict[str, Any]) -> dict:
        self._maybe_fail("insert", table, row)
        row_id = self._next_id[table]
        self._next_id[table] += 1
        self.tables[table][row_id] = {"id": row_id, **deepcopy(row)}
        return deepcopy(self.tables[table][row_id])

    async def update(self, table: Table, row_id: int, patch: dict[str, Any]) -> dict | None:
        self._maybe_fail("update", table, patch)
        row = self.tables[table].get(row_id)
        if row is None:
            return None
        row.update(deepcopy(patch))
        return deepcopy(row)

    async def delete(self, table: Table, row_id: int) -> None:
        self._maybe_fail("delete", table, row_id)
        self.tables[table].pop(row_id, None)

    async def get(self, table: Table, row_id: int) -> dict | None:
        self._maybe_fail("get", table, row_id)
        row = self.tables[table].get(row_id)
        return deepcopy(row) if row is not None else None

    async def select(
        self,
        table: Table,
        where: dict[str, Any] | None = None,
        order_by: str = "id",
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict]:
        self._maybe_fail("select", table, where)
        rows = [
            row for row in self.tables[table].values()
            if all(row.get(k) == v for k, v in (where or {}).items())
        ]
        rows.sort(key=lambda row: row.get(order_by), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return deepcopy(rows)

    async def count_where(self, table: Table, field: str, value: Any) -> int:
        self._maybe_fail("count", table, (field, value))
        return sum(1 for row in self.tables[table].values() if row.get(field) == value)


class FakeAssetStore:
    def __init__(self):
        self.objects: dict[str, dict] = {}
        self.uploads: list[str] = []
        self.destroyed: list[str] = []
        self.failing_folders: set[str] = set()
        self.fail_destroy = False
        self._counter = 0

    async def upload(
        self,
        source: bytes | Path,
        folder: str,
        content_type: str,
        public_id: str | None = None,
    ) -> AssetRef:
        if folder in self.failing_folders:
            raise StoreDown(f"upload to {folder} failed")
        data = source.read_bytes() if isinstance(source, Path) else source
        self._counter += 1
        key = f"{folder}/{public_id or f'asset-{self._counter}'}"
        self.objects[key] = {"folder": folder, "content_type": content_type, "data": data}
        self.uploads.append(key)
        return AssetRef(url=f"https://assets.test/{key}", public_id=key)

    async def destroy(self, public_id: str) -> None:
        if self.fail_destroy:
            raise StoreDown(f"destroy {public_id} failed")
        self.destroyed.append(public_id)
        self.objects.pop(public_id, None)


class FakeScanCodeEncoder:
    def __init__(self):
        self.encoded: list[str] = []
        self.fail = False

    def encode(self, target_url: str) -> bytes:
        if self.fail:
            raise StoreDown("encoder crashed")
        self.encoded.append(target_url)
        return b"\x89PNG" + target_url.encode()


FRONTEND = "https://front.test"
ADMIN_ID = 7


def make_lifecycle(repository, assets, encoder, policy=ScanCodePolicy.ROLLBACK, **kwargs):
    return SpecimenLifecycle(
        repository, assets, encoder,
        frontend_base_url=FRONTEND,
        scan_code_policy=policy,
        **kwargs,
    )
