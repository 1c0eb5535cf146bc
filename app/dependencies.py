# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(), and tests replace
# them through app.dependency_overrides.
# =============================================================================

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from app.config import settings
from app.exceptions import RateLimitExceededError
from core.services.company_service import CompanyRepository
from core.services.database_setup import DatabaseSetupService
from lib.database import Database
from lib.rate_limit import (
    InMemoryRateLimitStore,
    RateLimiter,
    RateLimitStore,
    RedisRateLimitStore,
)

logger = logging.getLogger(__name__)


def get_database() -> Database:
    """
    Get the shared Database instance.

    Returns the lazily created singleton wrapper.
    """
    return Database.get_instance()


def get_company_repository(
    database: Annotated[Database, Depends(get_database)],
) -> CompanyRepository:
    return CompanyRepository(database)


def get_setup_service(
    database: Annotated[Database, Depends(get_database)],
) -> DatabaseSetupService:
    return DatabaseSetupService(database)


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """
    Get the process-wide rate limiter.

    RATE_LIMIT_BACKEND=redis shares counters across instances through
    REDIS_URL; the default keeps them in this process.
    """
    store: RateLimitStore
    if settings.RATE_LIMIT_BACKEND == "redis":
        store = RedisRateLimitStore.from_url(settings.REDIS_URL)
    else:
        store = InMemoryRateLimitStore()

    logger.info(
        f"Rate limiter: {settings.RATE_LIMIT_MAX_REQUESTS} requests / "
        f"{settings.RATE_LIMIT_WINDOW_SECONDS}s ({settings.RATE_LIMIT_BACKEND})"
    )
    return RateLimiter(
        store,
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )


def client_address(request: Request) -> str:
    """
    Identify the caller for rate limiting.

    Uses the first X-Forwarded-For hop, then X-Real-IP, then "unknown".
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.headers.get("x-real-ip") or "unknown"


async def enforce_rate_limit(
    request: Request,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """
    Count this request against the caller's window.

    Raises:
        RateLimitExceededError: If the caller is over its limit
    """
    decision = await limiter.hit(client_address(request))
    if decision.limited:
        raise RateLimitExceededError(retry_after=decision.retry_after)


# Type aliases for dependency injection
DatabaseDep = Annotated[Database, Depends(get_database)]
CompanyRepositoryDep = Annotated[CompanyRepository, Depends(get_company_repository)]
SetupServiceDep = Annotated[DatabaseSetupService, Depends(get_setup_service)]
