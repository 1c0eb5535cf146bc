# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - company.py: Company directory response schemas
# - registration.py: Appraiser registration wizard data
# - validation.py: Validation results and sanitized inputs
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Company Models - Directory responses
# -----------------------------------------------------------------------------
from .company import (
    Company,
    CompanyDetail,
    CompanyList,
    PaginationInfo,
)

# -----------------------------------------------------------------------------
# Registration Models - Wizard state
# -----------------------------------------------------------------------------
from .registration import (
    REFERENCE_COUNT,
    TOTAL_STEPS,
    Reference,
    RegistrationData,
)

# -----------------------------------------------------------------------------
# Validation Models - Results of lib.validation
# -----------------------------------------------------------------------------
from .validation import (
    FieldError,
    PaginationParams,
    SanitizedCompany,
    SearchParams,
    ValidationResult,
)

__all__ = [
    # Company
    "Company",
    "CompanyDetail",
    "CompanyList",
    "PaginationInfo",
    # Registration
    "REFERENCE_COUNT",
    "TOTAL_STEPS",
    "Reference",
    "RegistrationData",
    # Validation
    "FieldError",
    "PaginationParams",
    "SanitizedCompany",
    "SearchParams",
    "ValidationResult",
]
