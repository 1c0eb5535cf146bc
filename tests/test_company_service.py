# =============================================================================
# tests/test_company_service.py - Tests for Company Directory Queries
# =============================================================================

import asyncio

import pytest

from core.models.validation import PaginationParams, SearchParams
from core.services.company_service import (
    COUNT_ALL_SQL,
    COUNT_BY_NAME_AND_STATE_SQL,
    COUNT_BY_NAME_SQL,
    COUNT_BY_STATE_SQL,
    LIST_ALL_SQL,
    LIST_BY_NAME_AND_STATE_SQL,
    LIST_BY_NAME_SQL,
    LIST_BY_STATE_SQL,
    CompanyRepository,
    build_listing_statements,
)
from lib.database import DatabaseError
from tests.fakes import FakeDatabase, failing_database


# =============================================================================
# Statement Selection
# =============================================================================

class TestBuildListingStatements:
    """Tests for picking one of the four listing shapes."""

    @pytest.mark.parametrize("query,state,expected_list,expected_count", [
        ("", "ALL", LIST_ALL_SQL, COUNT_ALL_SQL),
        ("peak", "ALL", LIST_BY_NAME_SQL, COUNT_BY_NAME_SQL),
        ("", "TX", LIST_BY_STATE_SQL, COUNT_BY_STATE_SQL),
        ("peak", "TX", LIST_BY_NAME_AND_STATE_SQL, COUNT_BY_NAME_AND_STATE_SQL),
    ])
    def test_shape_selection(self, query, state, expected_list, expected_count):
        list_sql, count_sql, _, _ = build_listing_statements(
            SearchParams(query=query, state=state), PaginationParams()
        )

        assert list_sql == expected_list
        assert count_sql == expected_count

    def test_no_filter_params(self):
        _, _, list_params, count_params = build_listing_statements(
            SearchParams(), PaginationParams(page=3, limit=10)
        )

        assert list_params == {"limit": 10, "offset": 20}
        assert count_params == {}

    def test_name_and_state_params(self):
        _, _, list_params, count_params = build_listing_statements(
            SearchParams(query="peak", state="TX"), PaginationParams()
        )

        assert list_params == {"pattern": "%peak%", "state": "TX", "limit": 20, "offset": 0}
        assert count_params == {"pattern": "%peak%", "state": "TX"}

    def test_query_never_spliced_into_sql(self):
        hostile = "'; DROP TABLE amc_companies; --"
        list_sql, count_sql, list_params, _ = build_listing_statements(
            SearchParams(query=hostile), PaginationParams()
        )

        assert hostile not in list_sql
        assert hostile not in count_sql
        assert list_params["pattern"] == f"%{hostile}%"

    def test_listing_ordered_by_name(self):
        for sql in (LIST_ALL_SQL, LIST_BY_NAME_SQL, LIST_BY_STATE_SQL, LIST_BY_NAME_AND_STATE_SQL):
            assert "ORDER BY name ASC" in sql
            assert "LIMIT :limit OFFSET :offset" in sql


# =============================================================================
# Repository
# =============================================================================

class TestCompanyRepository:
    """Tests for CompanyRepository."""

    def test_runs_list_and_count(self):
        database = FakeDatabase(responses={
            "COUNT(*) AS total": [{"total": 42}],
            "SELECT id": [{"id": 1, "name": "BluePeak Appraisal Management", "state": "TX"}],
        })
        repository = CompanyRepository(database)

        companies, total = asyncio.run(repository.list_companies(
            SearchParams(query="blue", state="TX"), PaginationParams(page=2, limit=5)
        ))

        assert total == 42
        assert [c.name for c in companies] == ["BluePeak Appraisal Management"]
        assert companies[0].id == "1"
        assert len(database.statements("query")) == 2

        params = [p for _, sql, p in database.calls if "LIMIT" in sql][0]
        assert params == {"pattern": "%blue%", "state": "TX", "limit": 5, "offset": 5}

    def test_database_failure_propagates(self):
        repository = CompanyRepository(failing_database())

        with pytest.raises(DatabaseError):
            asyncio.run(repository.list_companies(SearchParams(), PaginationParams()))

    def test_lists_from_sqlite(self, sqlite_database):
        repository = CompanyRepository(sqlite_database)

        companies, total = asyncio.run(repository.list_companies(
            SearchParams(), PaginationParams(page=1, limit=2)
        ))

        assert total == 3
        assert [c.name for c in companies] == [
            "BluePeak Appraisal Management",
            "Lone Star Valuations",
        ]
        assert companies[1].email == ""

    def test_state_filter_from_sqlite(self, sqlite_database):
        repository = CompanyRepository(sqlite_database)

        companies, total = asyncio.run(repository.list_companies(
            SearchParams(state="CA"), PaginationParams()
        ))

        assert total == 1
        assert companies[0].name == "Precision Valuation Services"
        assert companies[0].signup_url == "https://precisionvaluations.com/signup"

    def test_page_past_end_is_empty(self, sqlite_database):
        repository = CompanyRepository(sqlite_database)

        companies, total = asyncio.run(repository.list_companies(
            SearchParams(), PaginationParams(page=5, limit=20)
        ))

        assert companies == []
        assert total == 3

    def test_get_company(self, sqlite_database):
        company = asyncio.run(CompanyRepository(sqlite_database).get_company(2))
        assert company.name == "BluePeak Appraisal Management"

    def test_get_missing_company(self, sqlite_database):
        assert asyncio.run(CompanyRepository(sqlite_database).get_company(999)) is None
