"""Audit logging utilities."""
import logging
from datetime import date, datetime
from typing import Any, Optional

from gardenbook.core.domain_types import Table
from gardenbook.core.repository_protocols import CatalogRepository

logger = logging.getLogger("gardenbook.audit")


async def log_change(
    repository: CatalogRepository,
    admin_id: int,
    entity_type: str,
    entity_id: int,
    action: str,
    before: Optional[dict] = None,
    after: Optional[dict] = None,
) -> None:
    """Record a change to the audit log.

    Args:
        repository: Catalog store the entry is written to
        admin_id: Admin who performed the change
        entity_type: 'plant', 'fish' or 'category'
        entity_id: ID of the entity
        action: 'CREATE', 'UPDATE', 'DELETE' or 'REGENERATE_SCAN_CODE'
        before: State before change (None for CREATE)
        after: State after change (None for DELETE)

    The audited mutation is already durable when this runs, so a failed
    write is logged rather than raised.
    """
    entry = {
        "user_id": admin_id,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "action": action,
        "diff_json": {"before": _jsonable(before), "after": _jsonable(after)},
    }
    try:
        await repository.insert(Table.AUDIT_LOG, entry)
    except Exception:
        logger.warning(
            "Audit write failed for %s %s %s", action, entity_type, entity_id,
            exc_info=True,
        )


def _jsonable(row: Optional[dict]) -> Optional[dict]:
    if row is None:
        return None
    result: dict[str, Any] = {}
    for key, value in row.items():
        # Convert non-serializable types
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        result[key] = value
    return result
