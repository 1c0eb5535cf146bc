# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from typing import Any


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
        class DatabaseError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="DATABASE_ERROR", **kwargs)
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
# String Utilities
# =============================================================================

def is_blank(value: Any) -> bool:
    """
    Check whether a value is missing or only whitespace.

    Non-string values count as blank unless they are truthy, so a
    form field left as None behaves the same as one left as "   ".

    Example:
        is_blank(None)     # True
        is_blank("  ")     # True
        is_blank("Smith")  # False
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return not value
