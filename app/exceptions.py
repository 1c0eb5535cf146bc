# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Every error response has the same shape:
#   {"error": "<what went wrong>", "details": <optional context>}
#
# Validation failures list each bad field; rate-limit and server errors never
# leak internals (server error text is only attached in development).
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from app.config import settings
from core.models.validation import FieldError


class AMCDirectoryError(Exception):
    """
    Base exception for the AMC Directory API.

    All HTTP-facing exceptions inherit from this class. Raise one from a
    route and the registered handler turns it into a JSON response.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Any = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            result["details"] = self.details
        return result


# =============================================================================
# Client Errors
# =============================================================================

class InvalidParametersError(AMCDirectoryError):
    """Raised when request parameters fail validation."""

    def __init__(self, message: str, errors: list[FieldError]):
        super().__init__(
            message=message,
            status_code=400,
            details=[error.model_dump() for error in errors],
        )
        self.errors = errors


class CompanyNotFoundError(AMCDirectoryError):
    """Raised when a company ID doesn't exist."""

    def __init__(self, company_id: int):
        super().__init__(
            message=f"Company not found: {company_id}",
            status_code=404,
        )


class RateLimitExceededError(AMCDirectoryError):
    """Raised when a client exceeds its request budget for the window."""

    def __init__(self, retry_after: int):
        super().__init__(
            message="Rate limit exceeded. Please try again later.",
            status_code=429,
            headers={"Retry-After": str(retry_after)},
        )


# =============================================================================
# Server Errors
# =============================================================================

class ServerError(AMCDirectoryError):
    """
    Generic 500 with the underlying message attached only in development.

    Example:
        raise ServerError("Failed to fetch companies", error=str(e))
    """

    def __init__(self, message: str, error: str | None = None):
        super().__init__(
            message=message,
            status_code=500,
            details=error if settings.is_development else None,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def amc_directory_exception_handler(
    request: Request,
    exc: AMCDirectoryError
) -> JSONResponse:
    """Convert AMCDirectoryError to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )
