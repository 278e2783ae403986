# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from core.models.envelope import success_response
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    database: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health")
def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    health = HealthResponse(
        status="ok",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version="1.0.0",
    )
    return success_response(health.model_dump(), "API is healthy")


@router.get("/health/ready")
def readiness_check():
    """
    Readiness check endpoint.

    Probes the database; reports `degraded` instead of failing.
    """
    try:
        client = SupabaseClient.get_client()
        client.table("user_profiles").select("id").limit(1).execute()
        database = "healthy"
    except Exception as e:
        logger.warning(f"Readiness probe failed: {e}")
        database = f"unhealthy: {str(e)[:50]}"

    readiness = ReadinessResponse(
        status="ready" if database == "healthy" else "degraded",
        database=database,
        timestamp=_now(),
    )
    return success_response(readiness.model_dump(), "Readiness check completed")
