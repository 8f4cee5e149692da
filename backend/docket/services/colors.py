"""Owner-scoped registry of location display colors."""

from __future__ import annotations

import logging
from typing import Dict

from ..core.config import settings
from ..domain.errors import LocationColorError, StoreUnavailableError
from ..domain.models import LocationColorEntry, normalize_color
from .stores import LocationColorStore

logger = logging.getLogger(__name__)

# Preset palette offered to owners when they pick a court color.
PALETTE = {
    "Red": "#EF4444",
    "Blue": "#3B82F6",
    "Green": "#10B981",
    "Yellow": "#F59E0B",
    "Purple": "#8B5CF6",
    "Pink": "#EC4899",
    "Indigo": "#6366F1",
    "Teal": "#14B8A6",
}


class LocationColorRegistry:
    """Map an owner's location names to colors, with a fixed fallback.

    Location names match exactly (case-sensitive). Reads never fail and
    never create entries; store errors on writes propagate to the caller.

    Example:
        >>> registry = LocationColorRegistry(InMemoryLocationColorStore())
        >>> registry.set_color("lawyer_1", "Court A", "#ef4444")
        >>> registry.get_color("lawyer_1", "Court A")
        '#EF4444'
    """

    def __init__(self, store: LocationColorStore, default_color: str | None = None) -> None:
        self._store = store
        self.default_color = normalize_color(default_color or settings.DEFAULT_LOCATION_COLOR)

    def get_color(self, owner_id: str, location: str) -> str:
        if not location:
            return self.default_color
        try:
            entry = self._store.get(owner_id, location)
        except StoreUnavailableError:
            logger.warning(
                "Color lookup failed; using default",
                exc_info=True,
                extra={"owner_id": owner_id, "location": location},
            )
            return self.default_color
        return entry.color if entry is not None else self.default_color

    def set_color(self, owner_id: str, location: str, color: str) -> LocationColorEntry:
        location = (location or "").strip()
        if not location:
            raise LocationColorError("location must not be empty")
        entry = LocationColorEntry(owner_id=owner_id, location=location, color=normalize_color(color))
        self._store.put(entry)
        logger.info(
            "Location color set to %s",
            entry.color,
            extra={"owner_id": owner_id, "location": location},
        )
        return entry

    def remove_color(self, owner_id: str, location: str) -> None:
        self._store.delete(owner_id, (location or "").strip())

    def list_colors(self, owner_id: str) -> Dict[str, str]:
        return {entry.location: entry.color for entry in self._store.list(owner_id)}
