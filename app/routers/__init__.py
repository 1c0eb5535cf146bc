# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - companies.py: AMC directory search and lookup
# - database.py: Schema bootstrap and connectivity checks
# - health.py: Health check endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import companies
from . import database
from . import health

__all__ = [
    "companies",
    "database",
    "health",
]
