# =============================================================================
# app/routers/companies.py - AMC Directory Endpoints
# =============================================================================
# GET /api/companies            - search, filter and page through companies
# GET /api/companies/{id}       - one company
#
# Both endpoints are rate limited per client address. Query parameters are
# taken as raw strings and run through lib.validation so that bad input gets
# the same {error, details} 400 shape everywhere.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response

from app.dependencies import CompanyRepositoryDep, enforce_rate_limit
from app.exceptions import CompanyNotFoundError, InvalidParametersError, ServerError
from core.models.company import CompanyDetail, CompanyList, PaginationInfo
from lib.validation import validate_id, validate_pagination_params, validate_search_params

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

# Directory data changes only when re-seeded
LISTING_CACHE_CONTROL = "public, max-age=300"


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=CompanyList)
async def list_companies(
    response: Response,
    repository: CompanyRepositoryDep,
    q: Annotated[str | None, Query(description="Case-insensitive name search")] = None,
    state: Annotated[str | None, Query(description="Two-letter state code or ALL")] = None,
    page: Annotated[str | None, Query(description="Page number (1-1000)")] = None,
    limit: Annotated[str | None, Query(description="Items per page (1-100)")] = None,
):
    """
    List companies in the directory.

    Filters by name substring (q) and/or state, ordered by name.
    Returns the page plus pagination totals.
    """
    search = validate_search_params(q, state)
    if not search.is_valid:
        raise InvalidParametersError("Invalid search parameters", search.errors)

    pagination = validate_pagination_params(page, limit)
    if not pagination.is_valid:
        raise InvalidParametersError("Invalid pagination parameters", pagination.errors)

    params = pagination.sanitized_data
    logger.debug("Fetching companies from database...")

    try:
        companies, total = await repository.list_companies(search.sanitized_data, params)
    except Exception as e:
        logger.exception(f"Error fetching companies: {e}")
        raise ServerError("Failed to fetch companies", error=str(e)) from e

    logger.debug(f"Found {len(companies)} companies")

    response.headers["Cache-Control"] = LISTING_CACHE_CONTROL
    return CompanyList(
        companies=companies,
        pagination=PaginationInfo.for_total(params.page, params.limit, total),
    )


@router.get("/{company_id}", response_model=CompanyDetail)
async def get_company(
    company_id: Annotated[str, Path(description="Numeric company ID")],
    repository: CompanyRepositoryDep,
):
    """
    Get one company by ID.
    """
    result = validate_id(company_id)
    if not result.is_valid:
        raise InvalidParametersError("Invalid company ID", result.errors)

    try:
        company = await repository.get_company(result.sanitized_data)
    except Exception as e:
        logger.exception(f"Error fetching company {company_id}: {e}")
        raise ServerError("Failed to fetch company", error=str(e)) from e

    if company is None:
        raise CompanyNotFoundError(result.sanitized_data)

    return CompanyDetail(company=company)
