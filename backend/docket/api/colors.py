"""Per-owner location color endpoints."""

from typing import Dict

from fastapi import APIRouter, Depends, Query, Response, status

from ..domain import schemas
from ..services.colors import PALETTE, LocationColorRegistry
from .deps import get_color_registry

router = APIRouter(prefix="/location-colors", tags=["location-colors"])


@router.get("")
def list_location_colors(
    owner: str = Query(..., min_length=1),
    registry: LocationColorRegistry = Depends(get_color_registry),
) -> Dict[str, str]:
    return registry.list_colors(owner)


@router.get("/palette")
def get_palette() -> Dict[str, str]:
    """Preset colors offered in the settings dialog."""
    return dict(PALETTE)


@router.put("/{location}")
def put_location_color(
    location: str,
    body: schemas.LocationColorIn,
    owner: str = Query(..., min_length=1),
    registry: LocationColorRegistry = Depends(get_color_registry),
) -> Dict[str, str]:
    entry = registry.set_color(owner, location, body.color)
    return {"location": entry.location, "color": entry.color}


@router.delete("/{location}", status_code=status.HTTP_204_NO_CONTENT)
def delete_location_color(
    location: str,
    owner: str = Query(..., min_length=1),
    registry: LocationColorRegistry = Depends(get_color_registry),
) -> Response:
    registry.remove_color(owner, location)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
