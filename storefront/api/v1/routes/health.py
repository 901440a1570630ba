"""
Health check endpoints

- /health (liveness): the process is up, dependencies are not checked
- /health/ready (readiness): the database answers a trivial query

Reference:
- https://kubernetes.io/docs/tasks/configure-pod-container/configure-liveness-readiness-startup-probes/
"""
import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storefront.core import database

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


class HealthResponse(BaseModel):
    status: str
    message: str


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check (liveness)",
    description="Returns the liveness status of the application. Does not check dependencies.",
    status_code=status.HTTP_200_OK,
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", message="Service is running")


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check",
    description="Returns the readiness status including a database connectivity check.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Service is not ready (database unavailable)"}
    }
)
async def readiness_check() -> HealthResponse:
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Readiness check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not ready - database unavailable"
        ) from e

    return HealthResponse(status="ready", message="Service is ready to serve traffic")
