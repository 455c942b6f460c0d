"""Health Probes — liveness and database readiness.

Invariants:
    - GET /api/v1/health/ answers 200 whenever the process serves requests
    - GET /api/v1/health/ready answers 503 until the database answers SELECT 1
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from tasktrack import __version__
from tasktrack.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def liveness():
    return {"status": "alive", "version": __version__}


@router.get("/ready")
async def readiness():
    """503 with a reason while the session manager is missing or the DB is down."""
    if database.db_manager is None:
        return JSONResponse(
            status_code=503,
            content={"status": "starting", "database": "not_initialized"},
        )
    if not await database.db_manager.health_check():
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "database": "unreachable"},
        )
    return {"status": "ready", "database": "ok"}
