# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - validation.py: Input sanitization and validation
# - database.py: Parameterized SQL access through SQLAlchemy
# - rate_limit.py: Fixed-window rate limiter and its stores
# - utils.py: Shared utilities (error base class, blank checks)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.utils import ApplicationError, is_blank
from lib.validation import (
    sanitize_string,
    validate_company_data,
    validate_id,
    validate_pagination_params,
    validate_search_params,
)
from lib.database import Database, DatabaseError
from lib.rate_limit import (
    InMemoryRateLimitStore,
    RateLimiter,
    RateLimitStore,
    RedisRateLimitStore,
)

__all__ = [
    # Utils
    "ApplicationError",
    "is_blank",
    # Validation
    "sanitize_string",
    "validate_company_data",
    "validate_id",
    "validate_pagination_params",
    "validate_search_params",
    # Database
    "Database",
    "DatabaseError",
    # Rate limiting
    "InMemoryRateLimitStore",
    "RateLimiter",
    "RateLimitStore",
    "RedisRateLimitStore",
]
