"""All SQLAlchemy models – re-exported for Alembic and app use."""

from gardenbook.models.user import User, Role
from gardenbook.models.category import Category
from gardenbook.models.specimen import Plant, Fish
from gardenbook.models.audit_log import AuditLog

__all__ = [
    "User", "Role",
    "Category",
    "Plant", "Fish",
    "AuditLog",
]
