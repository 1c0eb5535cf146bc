# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the AMC Directory API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import get_rate_limiter
from app.exceptions import AMCDirectoryError, amc_directory_exception_handler
from app.routers import companies, database, health
from lib.database import Database
from lib.rate_limit import RedisRateLimitStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log the active configuration
    - Shutdown: close pooled database connections and the Redis client
    """
    logger.info(f"Starting AMC Directory API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down AMC Directory API")

    Database.dispose_instance()

    if get_rate_limiter.cache_info().currsize:
        store = get_rate_limiter().store
        if isinstance(store, RedisRateLimitStore):
            await store.close()


# Create FastAPI application
app = FastAPI(
    title="AMC Directory API",
    description="""
## Appraisal Management Company Directory

Search the directory of appraisal management companies (AMCs) that
appraisers can sign up with.

### Quick Start

```bash
# Create the schema and seed data
curl -X POST http://localhost:8000/api/init-db

# Search companies in Texas
curl "http://localhost:8000/api/companies?state=TX&page=1&limit=20"

# Name search
curl "http://localhost:8000/api/companies?q=valuation"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Companies",
            "description": "Search and browse appraisal management companies",
        },
        {
            "name": "Database",
            "description": "Schema bootstrap and connectivity checks",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(AMCDirectoryError)
async def handle_amc_directory_exception(request: Request, exc: AMCDirectoryError):
    """Handle custom AMC Directory exceptions."""
    return await amc_directory_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    content = {"error": "An unexpected error occurred"}
    if settings.is_development:
        content["details"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# =============================================================================
# Routers
# =============================================================================

# Company directory endpoints
app.include_router(
    companies.router,
    prefix="/api/companies",
    tags=["Companies"]
)

# Database bootstrap endpoints
app.include_router(
    database.router,
    prefix="/api",
    tags=["Database"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "AMC Directory API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }
