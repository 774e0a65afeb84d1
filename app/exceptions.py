# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class BrandRiderException(Exception):
    """
    Base exception for BrandRider API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "BRANDRIDER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Brand Exceptions
# =============================================================================

class BrandNotFoundError(BrandRiderException):
    """Raised when a brand ID doesn't exist (or belongs to someone else)."""

    def __init__(self, brand_id: str):
        super().__init__(
            message=f"Brand not found: {brand_id}",
            code="BRAND_NOT_FOUND",
            status_code=404,
            suggestion="Check that the brand_id is correct",
            details={"brand_id": brand_id}
        )


class CorpusTooShortError(BrandRiderException):
    """Raised when a generation request's corpus is too short to analyze."""

    def __init__(self, length: int, minimum: int):
        super().__init__(
            message=f"Corpus must be at least {minimum} characters",
            code="CORPUS_TOO_SHORT",
            status_code=400,
            suggestion="Paste a longer writing sample or upload another document",
            details={"length": length, "minimum": minimum}
        )


# =============================================================================
# Task Exceptions
# =============================================================================

class TaskSubmitError(BrandRiderException):
    """Raised when the task queue can't be reached."""

    def __init__(self, error: str, action: str = "queue generation"):
        super().__init__(
            message=f"Failed to {action}: {error}",
            code="TASK_SUBMIT_FAILED",
            status_code=503,
            suggestion="The task queue may be down. Try again in a minute.",
            details={"error": error}
        )


class TaskNotFoundError(BrandRiderException):
    """Raised when a task ID is unknown or belongs to another user."""

    def __init__(self, task_id: str):
        super().__init__(
            message=f"Task not found: {task_id}",
            code="TASK_NOT_FOUND",
            status_code=404,
            suggestion="Check the task_id returned by POST /api/v1/brands/generate",
            details={"task_id": task_id}
        )


# =============================================================================
# Storage Exceptions
# =============================================================================

class StorageUploadError(BrandRiderException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Check that the storage bucket exists and is public",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def brandrider_exception_handler(
    request: Request,
    exc: BrandRiderException
) -> JSONResponse:
    """
    Convert BrandRiderException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
