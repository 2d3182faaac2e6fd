"""Error Hierarchy — typed, categorized exceptions for every task board failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Category is the failure kind callers branch on: not_found, forbidden,
      conflict, validation, unauthenticated, database, internal
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TaskBoardError base: FastAPI global handler catches all
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
    """Failure kinds exposed to callers."""
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    task_id: str | None = None
    container_id: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TaskBoardError(Exception):
    """Base exception for all task board errors."""

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

    @property
    def kind(self) -> str:
        return self.category.value

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
                    "task_id": self.context.task_id,
                    "container_id": self.context.container_id,
                    "debug_info": self.context.debug_info,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class FieldValidationError(TaskBoardError):
    """Malformed input: missing field, out-of-range length, invalid enum value."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class UnauthenticatedError(TaskBoardError):
    """No usable identity on the request."""
    def __init__(self, message: str = "Authentication required", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.UNAUTHENTICATED,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(TaskBoardError):
    """Authenticated, but not authorized for this entity."""
    def __init__(self, message: str = "Not authorized", context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.FORBIDDEN,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(TaskBoardError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(TaskBoardError):
    """Invariant violation against current stored state."""
    def __init__(self, message: str, code: str = "CONFLICT", context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class DefaultContainerImmutableError(ConflictError):
    """Default containers can never be updated or deleted."""
    def __init__(self, container_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.container_id = container_id
        super().__init__(
            "Default containers cannot be modified or deleted",
            "DEFAULT_CONTAINER_IMMUTABLE", ctx,
        )


class InvalidContainerError(ConflictError):
    """Container reference is not visible to the requester."""
    def __init__(self, reference: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid container or status: '{reference}'",
            "INVALID_CONTAINER", context,
        )
        self.reference = reference


class ActiveSessionExistsError(ConflictError):
    """Requester already has an active time-tracking session."""
    def __init__(
        self, holder_task_id: str, holder_task_title: str | None = None,
        same_task: bool = False, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.task_id = holder_task_id
        if same_task:
            message = "Time tracking is already active for this task"
        else:
            label = f"'{holder_task_title}'" if holder_task_title else holder_task_id
            message = f"Time tracking is already active on task {label}. Stop it first."
        super().__init__(message, "ACTIVE_SESSION_EXISTS", ctx)
        self.holder_task_id = holder_task_id
        self.same_task = same_task


class NoActiveSessionError(ConflictError):
    """stop() called without an active session in the task."""
    def __init__(self, task_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.task_id = task_id
        super().__init__(
            "No active time tracking session for this task",
            "NO_ACTIVE_SESSION", ctx,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TaskBoardError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
