"""SQLAlchemy implementation of the catalog repository.

Each call runs in its own short session, so a multi-step lifecycle operation
is a sequence of independent commits rather than one transaction.
"""
from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gardenbook.core.domain_types import Table
from gardenbook.core.repository_protocols import DuplicateRowError
from gardenbook.models import AuditLog, Category, Fish, Plant, User

MODELS = {
    Table.PLANTS: Plant,
    Table.FISH: Fish,
    Table.CATEGORIES: Category,
    Table.USERS: User,
    Table.AUDIT_LOG: AuditLog,
}


def entity_to_dict(entity: Any) -> dict:
    """Convert an SQLAlchemy entity to a plain row dict."""
    return {column.name: getattr(entity, column.name) for column in entity.__table__.columns}


def _column(model, field: str):
    if field not in model.__table__.columns:
        raise ValueError(f"{model.__tablename__} has no column '{field}'")
    return getattr(model, field)


class SqlCatalogRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def insert(self, table: Table, row: dict[str, Any]) -> dict:
        model = MODELS[table]
        for field in row:
            _column(model, field)
        async with self._session_factory() as session:
            entity = model(**row)
            session.add(entity)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise DuplicateRowError(str(exc.orig)) from exc
            await session.refresh(entity)
            return entity_to_dict(entity)

    async def update(self, table: Table, row_id: int, patch: dict[str, Any]) -> Optional[dict]:
        model = MODELS[table]
        async with self._session_factory() as session:
            entity = await session.get(model, row_id)
            if entity is None:
                return None
            for field, value in patch.items():
                _column(model, field)
                setattr(entity, field, value)
            await session.commit()
            await session.refresh(entity)
            return entity_to_dict(entity)

    async def delete(self, table: Table, row_id: int) -> None:
        model = MODELS[table]
        async with self._session_factory() as session:
            await session.execute(delete(model).where(model.id == row_id))
            await session.commit()

    async def get(self, table: Table, row_id: int) -> Optional[dict]:
        async with self._session_factory() as session:
            entity = await session.get(MODELS[table], row_id)
            return entity_to_dict(entity) if entity is not None else None

    async def select(
        self,
        table: Table,
        where: Optional[dict[str, Any]] = None,
        order_by: str = "id",
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict]:
        model = MODELS[table]
        stmt = select(model)
        for field, value in (where or {}).items():
            stmt = stmt.where(_column(model, field) == value)
        order_column = _column(model, order_by)
        stmt = stmt.order_by(order_column.desc() if descending else order_column)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [entity_to_dict(entity) for entity in result.scalars().all()]

    async def count_where(self, table: Table, field: str, value: Any) -> int:
        model = MODELS[table]
        stmt = select(func.count()).select_from(model).where(_column(model, field) == value)
        async with self._session_factory() as session:
            return (await session.execute(stmt)).scalar_one()
