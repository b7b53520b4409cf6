"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from convo.config import Settings

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Service status.

    ``identity_configured`` is false when no inbox identity is set; such an
    instance can decode invites but cannot issue or redeem them.
    """

    status: str
    timestamp: datetime
    git_sha: str
    environment: str
    identity_configured: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: FromDishka[Settings]) -> HealthResponse:
    """Report liveness and whether an inbox identity is configured."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        git_sha=settings.git_sha,
        environment=settings.environment,
        identity_configured=settings.messaging.identity_configured,
    )
