"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    DatabaseError,
    StoreConnectionError,

    # Machines
    MachineNotFoundError,
    WorkItemNotFoundError,

    # Settings
    InvalidActiveDayError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "DatabaseError",
    "StoreConnectionError",

    # Machines
    "MachineNotFoundError",
    "WorkItemNotFoundError",

    # Settings
    "InvalidActiveDayError",
]
