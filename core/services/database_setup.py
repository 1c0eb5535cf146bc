# =============================================================================
# core/services/database_setup.py - Schema Bootstrap and Health
# =============================================================================
# One-time setup of the directory database:
# - create_tables: amc_companies + indexes on state and name (idempotent)
# - seed_initial_data: insert the launch set of AMCs
# - initialize: create tables, then seed only if the table is empty
# - check_health: connectivity + whether the table exists
#
# Both initialize() and check_health() report failures in their return value
# instead of raising, so the HTTP layer can answer with a status report.
# =============================================================================

import logging
from typing import Any

from lib.database import Database, DatabaseError

logger = logging.getLogger(__name__)


# =============================================================================
# Schema
# =============================================================================

COMPANIES_TABLE = "amc_companies"

CREATE_COMPANIES_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS amc_companies (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        phone VARCHAR(50),
        email VARCHAR(255),
        state VARCHAR(2),
        website TEXT,
        signup_url TEXT,
        created_at TIMESTAMP DEFAULT NOW(),
        updated_at TIMESTAMP DEFAULT NOW()
    )
"""

CREATE_STATE_INDEX_SQL = """
    CREATE INDEX IF NOT EXISTS idx_amc_companies_state ON amc_companies(state)
"""

CREATE_NAME_INDEX_SQL = """
    CREATE INDEX IF NOT EXISTS idx_amc_companies_name ON amc_companies(name)
"""

COUNT_COMPANIES_SQL = "SELECT COUNT(*) AS count FROM amc_companies"

INSERT_COMPANY_SQL = """
    INSERT INTO amc_companies (name, phone, email, state, website, signup_url)
    VALUES (:name, :phone, :email, :state, :website, :signup_url)
"""

SERVER_TIME_SQL = "SELECT NOW() AS timestamp, version() AS version"

TABLE_EXISTS_SQL = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = 'public' AND table_name = :table_name
"""


# =============================================================================
# Seed Data
# =============================================================================

SEED_COMPANIES: list[dict[str, str]] = [
    {
        "name": "Precision Valuation Services",
        "phone": "(800) 555-0123",
        "email": "info@precisionvaluations.com",
        "state": "CA",
        "website": "https://precisionvaluations.com",
        "signup_url": "https://precisionvaluations.com/signup",
    },
    {
        "name": "BluePeak Appraisal Management",
        "phone": "(877) 555-0147",
        "email": "support@bluepeakamc.com",
        "state": "TX",
        "website": "https://bluepeakamc.com",
        "signup_url": "https://bluepeakamc.com/register",
    },
    {
        "name": "UrbanEdge Valuation Group",
        "phone": "(866) 555-0199",
        "email": "team@urbanedgeval.com",
        "state": "NY",
        "website": "https://urbanedgeval.com",
        "signup_url": "https://urbanedgeval.com/vendors",
    },
    {
        "name": "SunCoast AMC",
        "phone": "(888) 555-0172",
        "email": "hello@suncoastamc.com",
        "state": "FL",
        "website": "https://suncoastamc.com",
        "signup_url": "https://suncoastamc.com/sign-up",
    },
    {
        "name": "Heartland Valuation Network",
        "phone": "(855) 555-0114",
        "email": "partners@heartlandvn.com",
        "state": "IL",
        "website": "https://heartlandvn.com",
        "signup_url": "https://heartlandvn.com/appraisers",
    },
    {
        "name": "Atlantic Coast Valuations",
        "phone": "(844) 555-0165",
        "email": "vendors@atlanticcoastval.com",
        "state": "NC",
        "website": "https://atlanticcoastval.com",
        "signup_url": "https://atlanticcoastval.com/appraiser-signup",
    },
    {
        "name": "Mountain View AMC",
        "phone": "(866) 555-0198",
        "email": "appraisers@mountainviewamc.com",
        "state": "CO",
        "website": "https://mountainviewamc.com",
        "signup_url": "https://mountainviewamc.com/register-appraiser",
    },
    {
        "name": "Northwest Property Solutions",
        "phone": "(877) 555-0134",
        "email": "join@nwpropsolutions.com",
        "state": "WA",
        "website": "https://nwpropsolutions.com",
        "signup_url": "https://nwpropsolutions.com/vendor-portal",
    },
]


class DatabaseSetupService:
    """
    Creates, seeds and inspects the directory schema.

    Example:
        service = DatabaseSetupService(Database.get_instance())
        result = service.initialize()
        # {"success": True, "message": "Database initialized successfully"}
    """

    def __init__(self, database: Database):
        self.database = database

    def create_tables(self) -> None:
        """Create amc_companies and its indexes if they do not exist."""
        self.database.execute(CREATE_COMPANIES_TABLE_SQL)
        self.database.execute(CREATE_STATE_INDEX_SQL)
        self.database.execute(CREATE_NAME_INDEX_SQL)
        logger.info("Tables created successfully")

    def count_companies(self) -> int:
        rows = self.database.query(COUNT_COMPANIES_SQL)
        return int(rows[0]["count"]) if rows else 0

    def seed_initial_data(self, companies: list[dict[str, str]] | None = None) -> int:
        """
        Insert the launch dataset in one transaction.

        Returns:
            Number of companies inserted
        """
        companies = SEED_COMPANIES if companies is None else companies
        self.database.execute(INSERT_COMPANY_SQL, companies)
        logger.info(f"Inserted {len(companies)} companies")
        return len(companies)

    def initialize(self) -> dict[str, Any]:
        """
        Create tables and seed them if empty.

        Returns:
            {"success": True, "message": ...} or {"success": False, "error": ...}
        """
        logger.info("Starting database initialization...")
        try:
            self.create_tables()

            existing = self.count_companies()
            if existing == 0:
                logger.info("No existing data found, creating initial dataset...")
                self.seed_initial_data()
            else:
                logger.info(f"Found {existing} existing companies, skipping seed.")

        except DatabaseError as e:
            logger.error(f"Database initialization failed: {e.message}")
            return {"success": False, "error": e.message}

        logger.info("Database initialization completed successfully")
        return {"success": True, "message": "Database initialized successfully"}

    def check_health(self) -> dict[str, Any]:
        """
        Report connectivity and whether the companies table exists.

        Returns:
            Dict with success, connected, hasRequiredTables, message and,
            when connected, the server timestamp; error on failure.
        """
        try:
            server = self.database.query(SERVER_TIME_SQL)
            tables = self.database.query(TABLE_EXISTS_SQL, {"table_name": COMPANIES_TABLE})
        except DatabaseError as e:
            return {
                "success": False,
                "connected": False,
                "hasRequiredTables": False,
                "error": e.message,
                "message": "Database connection failed",
            }

        has_tables = len(tables) > 0
        return {
            "success": True,
            "connected": True,
            "hasRequiredTables": has_tables,
            "timestamp": server[0]["timestamp"] if server else None,
            "message": (
                "Database is healthy and ready"
                if has_tables
                else "Database connected but tables need initialization"
            ),
        }
