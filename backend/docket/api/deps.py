"""Shared FastAPI dependencies.

Each getter returns a process-wide singleton; tests swap them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from ..core.config import settings
from ..domain.models import BusinessHours
from ..services.colors import LocationColorRegistry
from ..services.scheduling import SchedulingService
from ..services.stores import InMemoryAppointmentStore, InMemoryLocationColorStore
from ..services.travel import build_provider


@lru_cache
def get_color_registry() -> LocationColorRegistry:
    return LocationColorRegistry(InMemoryLocationColorStore())


@lru_cache
def get_service() -> SchedulingService:
    return SchedulingService(
        InMemoryAppointmentStore(),
        build_provider(settings),
        get_color_registry(),
        hours=BusinessHours.parse(
            settings.BUSINESS_HOURS_START, settings.BUSINESS_HOURS_END
        ),
        travel_timeout=settings.TRAVEL_TIMEOUT_SECONDS,
    )
