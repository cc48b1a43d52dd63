"""Health check endpoints."""

from fastapi import APIRouter

from app.api.deps import Store
from app.schemas.common import StatusResponse

router = APIRouter()


@router.get("", response_model=StatusResponse)
async def health_check() -> StatusResponse:
    """Basic health check endpoint."""
    return StatusResponse(status="ok")


@router.get("/ready", response_model=StatusResponse)
async def readiness_check(store: Store) -> StatusResponse:
    """Readiness check - verifies the database answers."""
    await store.ping()
    return StatusResponse(status="ready")
