# =============================================================================
# core/models/validation.py - Validation Result Schemas
# =============================================================================
# These models describe the outcome of validating untrusted input:
# - FieldError: One failed check ({field, message})
# - ValidationResult: isValid + ordered errors + sanitized data
# - SanitizedCompany / PaginationParams / SearchParams: typed, cleaned inputs
#
# A ValidationResult is produced fresh per validation call and never mutated.
# sanitized_data is present if and only if the input was valid.
# =============================================================================

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class FieldError(BaseModel):
    """
    A single validation failure.

    Example:
        {"field": "email", "message": "Invalid email format"}
    """

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Name of the offending input field")
    message: str = Field(..., description="Human-readable reason")


class ValidationResult(BaseModel, Generic[T]):
    """
    Outcome of a validation call.

    Errors are kept in the order the checks ran, and every field is
    checked even after an earlier one failed.

    Example:
        result = validate_pagination_params("2", "50")
        if result.is_valid:
            params = result.sanitized_data  # PaginationParams(page=2, limit=50)
    """

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: list[FieldError] = Field(default_factory=list)
    sanitized_data: T | None = None

    @classmethod
    def build(cls, errors: list[FieldError], sanitized: T | None) -> "ValidationResult[T]":
        """Create a result, dropping the sanitized data when any check failed."""
        return cls(
            is_valid=not errors,
            errors=errors,
            sanitized_data=None if errors else sanitized,
        )

    def error_fields(self) -> list[str]:
        """Names of the fields that failed, in check order."""
        return [error.field for error in self.errors]


class SanitizedCompany(BaseModel):
    """
    Company payload after sanitization.

    Optional fields that were absent are empty strings rather than missing,
    so the payload maps one-to-one onto the amc_companies columns.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    phone: str = ""
    email: str = ""
    state: str = ""
    website: str = ""
    signup_url: str = ""


class PaginationParams(BaseModel):
    """Validated page/limit pair for listing endpoints."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1, le=1000)
    limit: int = Field(default=20, ge=1, le=100)

    @property
    def offset(self) -> int:
        """Row offset of the first item on this page."""
        return (self.page - 1) * self.limit


class SearchParams(BaseModel):
    """Validated name query and state filter for the company directory."""

    model_config = ConfigDict(frozen=True)

    query: str = ""
    state: str = "ALL"

    @property
    def has_query(self) -> bool:
        return len(self.query) > 0

    @property
    def has_state_filter(self) -> bool:
        return bool(self.state) and self.state != "ALL"
