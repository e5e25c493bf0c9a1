"""Health check endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import literal, select
from sqlalchemy.exc import SQLAlchemyError

from scopedsearch.infrastructure.database.connection import SessionDep
from scopedsearch.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ReadyResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    checks: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check - always returns OK if service is running."""
    from scopedsearch import __version__

    return HealthResponse(status="healthy", version=__version__)


@router.get("/ready", response_model=ReadyResponse)
async def readiness_check(session: SessionDep) -> ReadyResponse:
    """Readiness check - verifies the database is reachable."""
    checks: dict[str, bool] = {}

    try:
        await session.execute(select(literal(1)))
        checks["database"] = True
    except (SQLAlchemyError, OSError) as e:
        logger.warning("database_health_check_failed", error=str(e))
        checks["database"] = False

    return ReadyResponse(ready=all(checks.values()), checks=checks)
