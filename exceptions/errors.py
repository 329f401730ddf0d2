"""
Custom exception classes for the application.

The scheduling core never raises these; they belong to the service and
route layers that validate input before it reaches the engine.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "MACHINE_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


class StoreConnectionError(AppError):
    """Document store unreachable (503)."""

    def __init__(self, message: str):
        super().__init__(
            code="STORE_CONNECTION_ERROR",
            message=f"Failed to connect to document store: {message}",
            status_code=503,
        )


# ===================
# MACHINE ERRORS
# ===================

class MachineNotFoundError(NotFoundError):
    """Machine not found."""

    def __init__(self, machine_id: str):
        super().__init__(
            resource="Machine",
            identifier=machine_id,
            code="MACHINE_NOT_FOUND"
        )


class WorkItemNotFoundError(NotFoundError):
    """No work item at the requested position of a machine's plan."""

    def __init__(self, machine_id: str, index: int, plan_length: int):
        super().__init__(
            resource="Work item",
            identifier=f"{machine_id}[{index}]",
            code="WORK_ITEM_NOT_FOUND"
        )
        self.details.update({"index": index, "plan_length": plan_length})


# ===================
# SETTINGS ERRORS
# ===================

class InvalidActiveDayError(ValidationError):
    """Active day is not a valid ISO calendar date."""

    def __init__(self, value: str):
        super().__init__(
            code="INVALID_ACTIVE_DAY",
            message="Active day must be an ISO date (YYYY-MM-DD)",
            details={"provided": value}
        )
