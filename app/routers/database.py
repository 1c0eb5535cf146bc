# =============================================================================
# app/routers/database.py - Database Bootstrap Endpoints
# =============================================================================
# POST /api/init-db          - create tables and seed them if empty
# GET  /api/init-db          - database health report
# GET  /api/test-connection  - raw connectivity test
#
# Error text from the database is only included in development. The handlers
# are plain functions, so FastAPI runs their blocking calls in its threadpool.
# =============================================================================

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import DatabaseDep, SetupServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/init-db")
def initialize_database(service: SetupServiceDep):
    """
    Create the schema and seed the launch data.

    Safe to call repeatedly: tables are created only if absent and the seed
    runs only on an empty table.
    """
    logger.info("Database initialization API called")

    result = service.initialize()

    if result["success"]:
        return {"success": True, "message": result["message"]}

    content = {"success": False, "message": "Database initialization failed"}
    if settings.is_development:
        content["error"] = result.get("error")
    return JSONResponse(status_code=500, content=content)


@router.get("/init-db")
def database_health(service: SetupServiceDep):
    """
    Report whether the database is reachable and initialized.
    """
    logger.info("Database health check API called")

    result = service.check_health()

    content = {
        "success": result["success"],
        "connected": result["connected"],
        "hasRequiredTables": result["hasRequiredTables"],
        "message": result["message"],
    }
    if settings.is_development:
        if result.get("timestamp") is not None:
            content["timestamp"] = str(result["timestamp"])
        if result.get("error"):
            content["error"] = result["error"]

    return JSONResponse(status_code=200 if result["success"] else 500, content=content)


@router.get("/test-connection")
def test_connection(database: DatabaseDep):
    """
    Run SELECT NOW(), version() and echo where we connected to.

    The password is never included, and driver error text only in
    development.
    """
    logger.info("API endpoint called: /api/test-connection")

    result = database.test_connection()

    return JSONResponse(
        status_code=200 if result["success"] else 500,
        content={
            "success": result["success"],
            "message": (
                "Database connection successful!"
                if result["success"]
                else "Database connection failed"
            ),
            "data": {k: str(v) for k, v in result["data"].items()} if result["success"] else None,
            "error": result.get("error") if settings.is_development else None,
            "environment": {
                "user": settings.DB_USER,
                "host": settings.DB_HOST,
                "port": settings.DB_PORT,
                "database": settings.DB_NAME,
            },
        },
    )
