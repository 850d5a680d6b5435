"""Boundary protocols: the collaborators the core talks to.

Core modules depend only on these Protocol types; the shell wires concrete
implementations (SQLAlchemy, boto3, qrcode, JWT) in ``gardenbook.dependencies``
and tests swap in in-memory fakes.
"""

import logging
from pathlib import Path
from typing import Any, Awaitable, Protocol, TypeVar

from gardenbook.core.domain_types import AdminIdentity, AssetRef, Table
from gardenbook.core.errors import CatalogError, DependencyError

logger = logging.getLogger("gardenbook.repository")

T = TypeVar("T")


class CatalogRepository(Protocol):
    """Table access keyed by numeric id. Rows are plain dicts.

    ``update`` returns None when the row no longer exists; ``delete`` of a
    missing row is a no-op.
    """
    async def insert(self, table: Table, row: dict[str, Any]) -> dict: ...
    async def update(
        self, table: Table, row_id: int, patch: dict[str, Any],
    ) -> dict | None: ...
    async def delete(self, table: Table, row_id: int) -> None: ...
    async def get(self, table: Table, row_id: int) -> dict | None: ...
    async def select(
        self,
        table: Table,
        where: dict[str, Any] | None = None,
        order_by: str = "id",
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict]: ...
    async def count_where(self, table: Table, field: str, value: Any) -> int: ...


class AssetStore(Protocol):
    """Durable object storage for specimen photos and scan codes."""
    async def upload(
        self,
        source: bytes | Path,
        folder: str,
        content_type: str,
        public_id: str | None = None,
    ) -> AssetRef: ...
    async def destroy(self, public_id: str) -> None: ...


class ScanCodeEncoder(Protocol):
    def encode(self, target_url: str) -> bytes: ...


class AdminGate(Protocol):
    async def authenticate(self, credential: str | None) -> AdminIdentity: ...


class DuplicateRowError(Exception):
    """Raised by a repository when an insert violates a unique constraint."""


async def call_repository(operation: str, awaitable: Awaitable[T]) -> T:
    """Await a repository call, translating unexpected failures to DependencyError."""
    try:
        return await awaitable
    except CatalogError:
        raise
    except Exception as exc:
        logger.error("Catalog %s failed", operation, exc_info=True)
        raise DependencyError(str(exc), f"catalog {operation}") from exc
