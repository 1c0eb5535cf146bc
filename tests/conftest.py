# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Provides a SQLite-backed Database, fake repositories and a TestClient
#   whose dependencies are overridden (no PostgreSQL or Redis needed)
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("RATE_LIMIT_BACKEND", "memory")
os.environ.setdefault("RATE_LIMIT_MAX_REQUESTS", "100")
os.environ.setdefault("RATE_LIMIT_WINDOW_SECONDS", "60")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from app.dependencies import get_company_repository, get_database, get_rate_limiter
from app.main import app
from core.models.company import Company
from lib.database import Database
from lib.rate_limit import InMemoryRateLimitStore, RateLimiter
from tests.fakes import FakeCompanyRepository, FakeDatabase


# SQLite flavor of amc_companies for exercising real SQL round-trips
SQLITE_SCHEMA = """
    CREATE TABLE amc_companies (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(255) NOT NULL,
        phone VARCHAR(50),
        email VARCHAR(255),
        state VARCHAR(2),
        website TEXT,
        signup_url TEXT,
        created_at TEXT
    )
"""

SQLITE_INSERT = """
    INSERT INTO amc_companies (name, phone, email, state, website, signup_url, created_at)
    VALUES (:name, :phone, :email, :state, :website, :signup_url, :created_at)
"""


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def company_rows():
    """Rows as they come back from amc_companies."""
    return [
        {
            "name": "Precision Valuation Services",
            "phone": "(800) 555-0123",
            "email": "info@precisionvaluations.com",
            "state": "CA",
            "website": "https://precisionvaluations.com",
            "signup_url": "https://precisionvaluations.com/signup",
            "created_at": "2024-01-15T10:30:00",
        },
        {
            "name": "BluePeak Appraisal Management",
            "phone": "(877) 555-0147",
            "email": "support@bluepeakamc.com",
            "state": "TX",
            "website": "https://bluepeakamc.com",
            "signup_url": "https://bluepeakamc.com/register",
            "created_at": "2024-01-15T10:30:00",
        },
        {
            "name": "Lone Star Valuations",
            "phone": None,
            "email": None,
            "state": "TX",
            "website": None,
            "signup_url": None,
            "created_at": None,
        },
    ]


@pytest.fixture
def sample_companies():
    """Companies as the API returns them."""
    return [
        Company(
            id="1",
            name="Precision Valuation Services",
            phone="(800) 555-0123",
            email="info@precisionvaluations.com",
            state="CA",
            website="https://precisionvaluations.com",
            signup_url="https://precisionvaluations.com/signup",
        ),
        Company(
            id="2",
            name="BluePeak Appraisal Management",
            phone="(877) 555-0147",
            email="support@bluepeakamc.com",
            state="TX",
            website="https://bluepeakamc.com",
            signup_url="https://bluepeakamc.com/register",
        ),
    ]


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def sqlite_database(tmp_path, company_rows):
    """A Database over a file-backed SQLite copy of amc_companies."""
    engine = create_engine(f"sqlite:///{tmp_path / 'amc.db'}")
    database = Database(engine)
    database.execute(SQLITE_SCHEMA)
    database.execute(SQLITE_INSERT, company_rows)
    yield database
    engine.dispose()


# =============================================================================
# API Fixtures
# =============================================================================

@pytest.fixture
def fake_repository(sample_companies):
    return FakeCompanyRepository(sample_companies)


@pytest.fixture
def fake_database():
    return FakeDatabase(responses={
        "NOW()": [{"timestamp": "2024-01-15 10:30:00", "version": "PostgreSQL 16.1"}],
        "information_schema": [{"table_name": "amc_companies"}],
        "COUNT(*) AS count": [{"count": 8}],
    })


@pytest.fixture
def rate_limiter():
    """A fresh limiter per test so counts never leak between tests."""
    return RateLimiter(InMemoryRateLimitStore(), max_requests=100, window_seconds=60)


@pytest.fixture
def client(fake_repository, fake_database, rate_limiter):
    """
    TestClient with every external dependency replaced.

    Tests can swap further dependencies through app.dependency_overrides;
    all overrides are cleared afterwards.
    """
    app.dependency_overrides[get_company_repository] = lambda: fake_repository
    app.dependency_overrides[get_database] = lambda: fake_database
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
