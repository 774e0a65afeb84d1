# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - UUID normalization for Supabase queries
# - ApplicationError, the base for all actionable errors
# - describe_error(), which turns any exception into a displayable string
# =============================================================================

from typing import Any
from uuid import UUID


# Shown when an exception carries no usable message
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Args:
        value: UUID as string or UUID object

    Returns:
        String representation of the UUID

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyServiceError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_SERVICE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }


# =============================================================================
# Error Display
# =============================================================================

def describe_error(error: BaseException | Any, fallback: str = UNKNOWN_ERROR_MESSAGE) -> str:
    """
    Convert anything raised by a step into a message a user can read.

    ApplicationError subclasses contribute their bare message (without the
    code prefix). Other exceptions use str(). Anything that produces an
    empty string, or is not an exception at all, gets the fallback.

    Args:
        error: The caught exception (or any other object)
        fallback: Message used when nothing better is available

    Returns:
        Non-empty display string

    Example:
        describe_error(ValueError("boom"))  # "boom"
        describe_error(ValueError())  # "An unknown error occurred"
    """
    if isinstance(error, ApplicationError):
        message = error.message
    elif isinstance(error, BaseException):
        message = str(error)
    else:
        message = ""

    message = (message or "").strip()
    return message or fallback
