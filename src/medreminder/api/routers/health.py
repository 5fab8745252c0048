"""
Health check endpoints.
"""

import logging
from datetime import datetime

from beanie import Document
from fastapi import APIRouter, Request, status
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from ...adapters.db.mongo.models.reminder_m import ReminderMongo
from ...core.config import get_settings
from ..schemas.common import ApiResponse
from ..utils.responses import fail, ok

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


async def ping_database(document: type[Document] = ReminderMongo) -> None:
    """Round-trip to MongoDB through the collection Beanie was initialised with."""
    collection = document.get_motor_collection()
    await collection.database.command("ping")


@router.get("", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings = get_settings()
    return ok(
        request,
        data=HealthResponse(
            status="healthy",
            timestamp=datetime.utcnow(),
            version=settings.app_version,
            service=settings.app_name,
        ),
        message="OK",
    )


@router.get("/live", response_model=ApiResponse[dict])
async def liveness_check(request: Request):
    """Process is up; no dependencies are checked."""
    return ok(request, data={"status": "alive"}, message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Returns whether the service can reach its database.
    """
    try:
        await ping_database()
    except PyMongoError as e:
        logger.error(f"Readiness check failed: {e}")
        return fail(
            request,
            error="NOT_READY",
            message="Database is not reachable",
            details={"database": "error"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    except Exception as e:
        # Beanie raises CollectionWasNotInitialized before startup has run
        logger.error(f"Readiness check failed: {e}")
        return fail(
            request,
            error="NOT_READY",
            message="Database is not initialised",
            details={"database": "not_initialised"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return ok(request, data={"status": "ready", "checks": {"database": "ok"}}, message="OK")
