"""
Custom exceptions for the database module.
"""
from typing import Optional, Dict, Any


class DatabaseError(Exception):
    """Base exception for all database-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            context: Additional context about the error
            original_exception: The original exception that caused this error
        """
        super().__init__(message)
        self.context = context or {}
        self.original_exception = original_exception


class ConnectionError(DatabaseError):
    """Raised when there are issues connecting to the database."""
    pass


class IntegrityError(DatabaseError):
    """Raised when a write violates a database constraint."""
    pass
