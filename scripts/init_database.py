#!/usr/bin/env python3
# =============================================================================
# scripts/init_database.py - Database Bootstrap Entry Point
# =============================================================================
# Creates the amc_companies table (and its indexes) and seeds it if empty,
# without starting the API.
#
# Usage:
#   python scripts/init_database.py           # create + seed
#   python scripts/init_database.py --check   # health report only
#
# Prerequisites:
#   - PostgreSQL reachable with the DB_* settings (.env file)
#   - Package installed (pip install -e .)
# =============================================================================

import argparse
import logging
import sys

from core.services.database_setup import DatabaseSetupService
from lib.database import Database

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def main() -> int:
    """Run the bootstrap (or the health check) and return an exit code."""
    parser = argparse.ArgumentParser(description="Initialize the AMC directory database")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report connectivity and table status",
    )
    args = parser.parse_args()

    service = DatabaseSetupService(Database.get_instance())

    print("=" * 60)
    print("AMC Directory Database Setup")
    print("=" * 60)

    try:
        if args.check:
            result = service.check_health()
            print(f"Connected:       {result['connected']}")
            print(f"Tables present:  {result['hasRequiredTables']}")
            print(result["message"])
        else:
            result = service.initialize()
            print(result.get("message") or f"Failed: {result.get('error')}")
    finally:
        Database.dispose_instance()

    return 0 if result["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
