# =============================================================================
# tests/test_models.py - Tests for Pydantic Models
# =============================================================================

from datetime import datetime

import pytest
from pydantic import ValidationError

from core.models import (
    Company,
    CompanyList,
    PaginationInfo,
    PaginationParams,
    RegistrationData,
    SearchParams,
)
from core.models.registration import REFERENCE_COUNT


# =============================================================================
# Company Model Tests
# =============================================================================

class TestCompany:
    """Tests for the Company response model."""

    def test_from_db_row(self):
        company = Company.from_db_row({
            "id": 7,
            "name": "SunCoast AMC",
            "phone": "(888) 555-0172",
            "email": "hello@suncoastamc.com",
            "state": "FL",
            "website": "https://suncoastamc.com",
            "signup_url": "https://suncoastamc.com/sign-up",
            "created_at": datetime(2024, 1, 15, 10, 30),
        })

        assert company.id == "7"
        assert company.signup_url == "https://suncoastamc.com/sign-up"
        assert company.created_at == datetime(2024, 1, 15, 10, 30)

    def test_null_columns_become_empty_strings(self):
        company = Company.from_db_row({
            "id": 1,
            "name": "Acme",
            "phone": None,
            "email": None,
            "state": None,
            "website": None,
            "signup_url": None,
            "created_at": None,
        })

        assert company.phone == ""
        assert company.email == ""
        assert company.state == ""
        assert company.website == ""
        assert company.signup_url == ""
        assert company.created_at is None

    def test_null_name_renders_as_empty_string(self):
        company = Company.from_db_row({"id": 3, "name": None})

        assert company.name == ""
        assert company.model_dump(by_alias=True)["name"] == ""

    def test_serializes_camel_case_keys(self):
        company = Company(id="1", name="Acme", signup_url="https://acme.com/join")
        data = company.model_dump(by_alias=True)

        assert data["signupUrl"] == "https://acme.com/join"
        assert "createdAt" in data
        assert "signup_url" not in data

    def test_accepts_alias_on_input(self):
        company = Company(id="1", name="Acme", signupUrl="https://acme.com/join")
        assert company.signup_url == "https://acme.com/join"

    def test_state_longer_than_two_characters_rejected(self):
        with pytest.raises(ValidationError):
            Company(id="1", name="Acme", state="CAL")


# =============================================================================
# Pagination Model Tests
# =============================================================================

class TestPaginationInfo:
    """Tests for pagination metadata."""

    @pytest.mark.parametrize("total,limit,expected_pages", [
        (0, 20, 0),
        (1, 20, 1),
        (20, 20, 1),
        (21, 20, 2),
        (95, 10, 10),
    ])
    def test_total_pages_rounds_up(self, total, limit, expected_pages):
        info = PaginationInfo.for_total(1, limit, total)
        assert info.total_pages == expected_pages

    def test_serializes_total_pages_alias(self):
        data = PaginationInfo.for_total(2, 20, 45).model_dump(by_alias=True)
        assert data == {"page": 2, "limit": 20, "total": 45, "totalPages": 3}

    def test_company_list_defaults_to_empty(self):
        listing = CompanyList(pagination=PaginationInfo.for_total(1, 20, 0))
        assert listing.companies == []


class TestQueryParams:
    """Tests for validated query parameter models."""

    def test_offset(self):
        assert PaginationParams(page=4, limit=25).offset == 75

    def test_pagination_bounds(self):
        with pytest.raises(ValidationError):
            PaginationParams(page=0)
        with pytest.raises(ValidationError):
            PaginationParams(limit=101)

    def test_search_flags(self):
        search = SearchParams(query="peak", state="TX")
        assert search.has_query
        assert search.has_state_filter

    def test_all_is_not_a_state_filter(self):
        assert not SearchParams(state="ALL").has_state_filter

    def test_frozen(self):
        search = SearchParams()
        with pytest.raises(ValidationError):
            search.query = "changed"


# =============================================================================
# Registration Model Tests
# =============================================================================

class TestRegistrationData:
    """Tests for the registration wizard state."""

    def test_defaults(self):
        data = RegistrationData()

        assert data.step == 1
        assert data.selected_company_ids == []
        assert len(data.references) == REFERENCE_COUNT
        assert data.designations == set()
        assert data.documents == {}
        assert data.terms_accepted is False
        assert data.privacy_accepted is False

    def test_selected_ids_deduplicated_in_order(self):
        data = RegistrationData(selected_company_ids=["3", "1", "3", "", "2", "1"])
        assert data.selected_company_ids == ["3", "1", "2"]

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            RegistrationData(firstname="Ada")

    def test_references_must_have_three_entries(self):
        with pytest.raises(ValidationError):
            RegistrationData(references=[{"name": "Only One"}])

    @pytest.mark.parametrize("step", [0, 7])
    def test_step_out_of_range(self, step):
        with pytest.raises(ValidationError):
            RegistrationData(step=step)

    def test_multi_selects_are_sets(self):
        data = RegistrationData(specialties=["Residential", "Residential", "FHA"])
        assert data.specialties == {"Residential", "FHA"}
