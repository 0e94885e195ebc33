"""
Health check endpoint polled by the desktop shell.
"""
from fastapi import APIRouter

from promptdesk.database.base import utcnow
from promptdesk.models.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", timestamp=utcnow())
