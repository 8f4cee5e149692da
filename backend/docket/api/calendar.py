"""Calendar view endpoint."""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..domain import schemas
from ..services.scheduling import SchedulingService
from .deps import get_service

router = APIRouter(tags=["calendar"])


@router.get("/calendar", response_model=List[schemas.DisplayEvent])
def get_calendar(
    owner: str = Query(..., min_length=1),
    start: datetime = Query(..., alias="from"),
    end: datetime = Query(..., alias="to"),
    service: SchedulingService = Depends(get_service),
) -> List[schemas.DisplayEvent]:
    """Return the owner's colored events with ``from <= start < to``."""
    if end <= start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="'to' must be after 'from'",
        )
    view = service.calendar(owner, start, end)
    return [schemas.DisplayEvent.from_domain(event) for event in view]
