"""Health check endpoints."""

from fastapi import APIRouter

from ..core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Return service health and the scheduling locale in use."""
    return {
        "status": "ok",
        "timezone": settings.OWNER_TZ,
        "business_hours": f"{settings.BUSINESS_HOURS_START}-{settings.BUSINESS_HOURS_END}",
        "travel_provider": settings.TRAVEL_PROVIDER,
    }
