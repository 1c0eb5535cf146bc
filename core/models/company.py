# =============================================================================
# core/models/company.py - Company Schemas
# =============================================================================
# These models define the API contract for the AMC directory:
# - Company: One appraisal management company as returned to clients
# - PaginationInfo: page / limit / total / totalPages block
# - CompanyList: Response body of GET /api/companies
#
# Companies are created by the one-time seed and are read-only afterwards.
# Python attributes are snake_case; JSON keys are camelCase (signupUrl,
# createdAt, totalPages) to match what the directory UI consumes.
# =============================================================================

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Company(BaseModel):
    """
    Schema for returning a company to clients.

    Returned by:
    - GET /api/companies (inside CompanyList)
    - GET /api/companies/{id}

    Example:
        {
            "id": "1",
            "name": "Precision Valuation Services",
            "phone": "(800) 555-0123",
            "email": "info@precisionvaluations.com",
            "state": "CA",
            "website": "https://precisionvaluations.com",
            "signupUrl": "https://precisionvaluations.com/signup",
            "createdAt": "2024-01-15T10:30:00"
        }
    """

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    # Opaque to clients: the SERIAL key rendered as a string
    id: str = Field(..., description="Company identifier")

    # amc_companies.name is NOT NULL, but an empty name still renders
    name: str = Field(..., description="Company name")

    phone: str = Field(default="", description="Contact phone number")

    email: str = Field(default="", description="Contact email address")

    state: str = Field(default="", max_length=2, description="Two-letter US state code")

    website: str = Field(default="", description="Company website URL")

    signup_url: str = Field(
        default="",
        alias="signupUrl",
        description="Where appraisers sign up with this AMC"
    )

    created_at: datetime | None = Field(
        default=None,
        alias="createdAt",
        description="When the row was seeded"
    )

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Company":
        """Create a Company from an amc_companies row; NULL columns become ""."""
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            phone=row.get("phone") or "",
            email=row.get("email") or "",
            state=row.get("state") or "",
            website=row.get("website") or "",
            signup_url=row.get("signup_url") or "",
            created_at=row.get("created_at"),
        )


class PaginationInfo(BaseModel):
    """Paging metadata for list responses."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(..., ge=1, description="Current page number (1-indexed)")
    limit: int = Field(..., ge=1, le=100, description="Items per page")
    total: int = Field(..., ge=0, description="Total matching companies")
    total_pages: int = Field(..., ge=0, alias="totalPages", description="Number of pages")

    @classmethod
    def for_total(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        """Build the block, deriving totalPages as ceil(total / limit)."""
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        )


class CompanyList(BaseModel):
    """
    Response body for the directory listing.

    Example:
        {
            "companies": [...],
            "pagination": {"page": 1, "limit": 20, "total": 8, "totalPages": 1}
        }
    """

    companies: list[Company] = Field(default_factory=list)
    pagination: PaginationInfo


class CompanyDetail(BaseModel):
    """Response body for a single company lookup."""

    company: Company
