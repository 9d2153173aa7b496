"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions inherit from.
All specialized exceptions are in their respective themed modules.
"""

from typing import Any


class FieldCacheError(Exception):
    """
    Base exception for all field cache errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling
    - Worker ID correlation
    - Structured error logging
    - Rich context for debugging

    Attributes:
        message: Error message
        worker_id: Worker ID for correlation (if available)
        details: Additional error details (dict)

    Example:
        raise CacheConnectionError(
            "Failed to connect to memcached",
            details={"hosts": ["localhost:11211"], "backend": "memcached"}
        )
    """

    def __init__(
        self, message: str, worker_id: str | None = None, details: dict[str, Any] | None = None
    ):
        self.message = message
        self.worker_id = worker_id
        self.details = (details or {}).copy()  # Create a copy to prevent external modification
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dict with error_type, message, worker_id, and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "worker_id": self.worker_id,
            "details": self.details,
        }

    def with_suggestion(self, suggestion: str) -> "FieldCacheError":
        """
        Add a suggestion to help users fix the error.

        Returns:
            Self (for method chaining)
        """
        self.details["suggestion"] = suggestion
        return self

    def with_context(self, **context) -> "FieldCacheError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        worker_id_str = f", worker_id='{self.worker_id}'" if self.worker_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{worker_id_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        worker_id: str | None = None,
        **details
    ) -> "FieldCacheError":
        """
        Create an error of this class from another exception.

        Useful for wrapping client-library exceptions with additional context.

        Example:
            >>> try:
            ...     client.get_many(keys)
            ... except OSError as e:
            ...     raise CacheConnectionError.from_exception(e, hosts=hosts)
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, worker_id=worker_id, details=error_details)


# Configuration exception (kept here as it's fundamental)
class ConfigurationError(FieldCacheError):
    """Raised when configuration is invalid or missing. Always fatal at startup."""
    pass
