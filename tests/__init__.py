# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the AMC Directory API:
# - test_validation.py: Sanitization and input validation
# - test_models.py: Pydantic schema behavior and JSON aliases
# - test_rate_limit.py: Window counters and the limiter
# - test_database.py: Database wrapper against SQLite
# - test_company_service.py: Listing statement shapes and queries
# - test_database_setup.py: Schema bootstrap and health report
# - test_registration_wizard.py: Step gates and transitions
# - test_api_*.py: Endpoint tests through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
