# =============================================================================
# core/services/company_service.py - Company Directory Queries
# =============================================================================
# Read access to the amc_companies table.
#
# A listing uses one of four statement shapes, picked from the validated
# search parameters:
#
#   | name query | state filter | WHERE clause                          |
#   |------------|--------------|---------------------------------------|
#   | no         | no           | (none)                                |
#   | yes        | no           | name ILIKE :pattern                   |
#   | no         | yes          | state = :state                        |
#   | yes        | yes          | name ILIKE :pattern AND state = :state|
#
# Each shape has a matching COUNT(*) statement. The two run concurrently and
# the listing waits for both. All values are bound parameters; the
# statement text itself is constant.
# =============================================================================

import asyncio
import logging
from typing import Any

from core.models.company import Company
from core.models.validation import PaginationParams, SearchParams
from lib.database import Database

logger = logging.getLogger(__name__)


# =============================================================================
# Statements
# =============================================================================

_COLUMNS = "id, name, phone, email, state, website, signup_url, created_at"

LIST_ALL_SQL = f"""
    SELECT {_COLUMNS}
    FROM amc_companies
    ORDER BY name ASC
    LIMIT :limit OFFSET :offset
"""

COUNT_ALL_SQL = """
    SELECT COUNT(*) AS total
    FROM amc_companies
"""

LIST_BY_NAME_SQL = f"""
    SELECT {_COLUMNS}
    FROM amc_companies
    WHERE name ILIKE :pattern
    ORDER BY name ASC
    LIMIT :limit OFFSET :offset
"""

COUNT_BY_NAME_SQL = """
    SELECT COUNT(*) AS total
    FROM amc_companies
    WHERE name ILIKE :pattern
"""

LIST_BY_STATE_SQL = f"""
    SELECT {_COLUMNS}
    FROM amc_companies
    WHERE state = :state
    ORDER BY name ASC
    LIMIT :limit OFFSET :offset
"""

COUNT_BY_STATE_SQL = """
    SELECT COUNT(*) AS total
    FROM amc_companies
    WHERE state = :state
"""

LIST_BY_NAME_AND_STATE_SQL = f"""
    SELECT {_COLUMNS}
    FROM amc_companies
    WHERE name ILIKE :pattern AND state = :state
    ORDER BY name ASC
    LIMIT :limit OFFSET :offset
"""

COUNT_BY_NAME_AND_STATE_SQL = """
    SELECT COUNT(*) AS total
    FROM amc_companies
    WHERE name ILIKE :pattern AND state = :state
"""

GET_BY_ID_SQL = f"""
    SELECT {_COLUMNS}
    FROM amc_companies
    WHERE id = :id
"""

# (has name query, has state filter) -> (list statement, count statement)
LISTING_STATEMENTS: dict[tuple[bool, bool], tuple[str, str]] = {
    (False, False): (LIST_ALL_SQL, COUNT_ALL_SQL),
    (True, False): (LIST_BY_NAME_SQL, COUNT_BY_NAME_SQL),
    (False, True): (LIST_BY_STATE_SQL, COUNT_BY_STATE_SQL),
    (True, True): (LIST_BY_NAME_AND_STATE_SQL, COUNT_BY_NAME_AND_STATE_SQL),
}


def build_listing_statements(
    search: SearchParams,
    pagination: PaginationParams,
) -> tuple[str, str, dict[str, Any], dict[str, Any]]:
    """
    Pick the statement shape for a listing and bind its values.

    Returns:
        (list_sql, count_sql, list_params, count_params)
    """
    list_sql, count_sql = LISTING_STATEMENTS[(search.has_query, search.has_state_filter)]

    filters: dict[str, Any] = {}
    if search.has_query:
        filters["pattern"] = f"%{search.query}%"
    if search.has_state_filter:
        filters["state"] = search.state

    list_params = {**filters, "limit": pagination.limit, "offset": pagination.offset}
    return list_sql, count_sql, list_params, filters


class CompanyRepository:
    """
    Read-only queries against amc_companies.

    The Database calls are blocking, so each one runs in a worker thread
    and the event loop stays free while they wait.
    """

    def __init__(self, database: Database):
        self.database = database

    async def list_companies(
        self,
        search: SearchParams,
        pagination: PaginationParams,
    ) -> tuple[list[Company], int]:
        """
        Fetch one page of companies and the total number of matches.

        Args:
            search: Validated name query / state filter
            pagination: Validated page / limit

        Returns:
            Tuple of (companies on this page, total matching companies)

        Raises:
            DatabaseError: If either statement fails
        """
        list_sql, count_sql, list_params, count_params = build_listing_statements(
            search, pagination
        )

        rows, count_rows = await asyncio.gather(
            asyncio.to_thread(self.database.query, list_sql, list_params),
            asyncio.to_thread(self.database.query, count_sql, count_params),
        )

        companies = [Company.from_db_row(row) for row in rows]
        total = int(count_rows[0]["total"]) if count_rows else 0

        logger.debug(f"Found {len(companies)} companies ({total} total)")
        return companies, total

    async def get_company(self, company_id: int) -> Company | None:
        """
        Fetch one company by its numeric id.

        Returns:
            The Company, or None if no row has that id
        """
        rows = await asyncio.to_thread(self.database.query, GET_BY_ID_SQL, {"id": company_id})
        return Company.from_db_row(rows[0]) if rows else None
