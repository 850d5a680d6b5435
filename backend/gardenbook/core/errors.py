"""Error hierarchy for catalog operations.

Every failure a lifecycle operation can surface is one of these classes;
collaborator exceptions are chained onto them and never returned raw.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    EXTERNAL_API = "external_api"
    DATABASE = "database"


@dataclass
class ErrorContext:
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    details: dict[str, Any] | None = None


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.context.details:
            body["details"] = self.context.details
        return {"error": body}


# ─── Client errors (400-level) ──────────────────────────────────

class ValidationError(CatalogError):
    """A required field is missing/empty or an upload is unacceptable."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.details = {"field": field}
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class ResourceNotFoundError(CatalogError):
    def __init__(
        self, resource_type: str, resource_id: int | str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class UnauthorizedError(CatalogError):
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class MissingCredentialError(UnauthorizedError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Missing Authorization header", "MISSING_CREDENTIAL", context)


class InvalidCredentialError(UnauthorizedError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Invalid token", "INVALID_CREDENTIAL", context)


class ForbiddenError(CatalogError):
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class NotAuthorizedError(ForbiddenError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Admin only", "NOT_AUTHORIZED", context)


class CategoryInUseError(CatalogError):
    """Category still referenced by specimens; carries per-kind usage counts."""
    def __init__(self, name: str, plants: int, fish: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.details = {"category": name, "plants": plants, "fish": fish}
        super().__init__(
            f"Category '{name}' is used by {plants} plant(s) and {fish} fish",
            "CATEGORY_IN_USE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.name = name
        self.plants = plants
        self.fish = fish


class CategoryExistsError(CatalogError):
    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Category '{name}' already exists",
            "CATEGORY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.name = name


# ─── Collaborator errors (500-level) ────────────────────────────

class AssetUploadFailedError(CatalogError):
    def __init__(self, folder: str, context: ErrorContext | None = None):
        super().__init__(
            f"Asset upload to '{folder}' failed",
            "ASSET_UPLOAD_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.folder = folder


class DependencyError(CatalogError):
    """Unexpected failure of the catalog store, asset store or encoder."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"{operation} failed: {message}",
            "DEPENDENCY_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
