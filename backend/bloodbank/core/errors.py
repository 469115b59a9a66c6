"""Error Hierarchy — typed, categorized exceptions for every blood bank failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) carry the exact reason of the failed check
    - All errors are terminal for the current operation (never retried internally)
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with BloodBankError base: one FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity: str | None = None
    entity_id: int | None = None
    user_id: int | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class BloodBankError(Exception):
    """Base exception for all blood bank errors."""

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
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "entity": self.context.entity,
                    "entity_id": self.context.entity_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Access Errors (401/403) ────────────────────────────────────

class UnauthenticatedError(BloodBankError):
    """No valid identity attached to the operation."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No authenticated user",
            "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(BloodBankError):
    """Identity present but lacks at least one required permission."""
    def __init__(self, missing: list[str], context: ErrorContext | None = None):
        super().__init__(
            "Insufficient permissions",
            "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.missing = missing


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(BloodBankError):
    """A referenced entity does not exist, or a collection query is empty.

    The message names the entity type: 'Blood type not found',
    'Request not updated', 'No donors found'.
    """
    def __init__(
        self, message: str, entity: str | None = None,
        entity_id: int | None = None, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity = ctx.entity or entity
        ctx.entity_id = ctx.entity_id if ctx.entity_id is not None else entity_id
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class BadRequestError(BloodBankError):
    """A domain validator failed (quantity, future date, blood-type match, enum value)."""
    def __init__(
        self, message: str, violation: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "BAD_REQUEST", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.violation = violation


class ConflictError(BloodBankError):
    """The mutation would break a uniqueness or profile-exclusivity rule."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(BloodBankError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
