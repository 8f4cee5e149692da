"""Merge appointment streams into one colored, time-ordered calendar view."""

from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, Iterator, List, Sequence

from ..domain.models import Appointment, DisplayEvent, to_local
from .colors import LocationColorRegistry


def _event_key(event: DisplayEvent):
    appt = event.appointment
    return (appt.start, appt.kind.value, appt.id or "")


class CalendarView:
    """Lazy, restartable sequence of ``DisplayEvent`` for one owner.

    Nothing is read from the sources until the view is iterated, and every
    iteration recomputes from them, so narrowing with ``for_day`` yields
    exactly the events a full pass would have produced for that day.
    Appointments are included when ``range_start <= start < range_end``.
    """

    def __init__(
        self,
        owner_id: str,
        range_start: datetime,
        range_end: datetime,
        sources: Sequence[Iterable[Appointment]],
        registry: LocationColorRegistry,
    ) -> None:
        self.owner_id = owner_id
        self.range_start = to_local(range_start)
        self.range_end = to_local(range_end)
        self._sources = tuple(sources)
        self._registry = registry

    def __iter__(self) -> Iterator[DisplayEvent]:
        events = [
            DisplayEvent(
                appointment=appt,
                color=self._registry.get_color(self.owner_id, appt.location),
            )
            for source in self._sources
            for appt in source
            if appt.owner_id == self.owner_id
            and self.range_start <= appt.start < self.range_end
        ]
        events.sort(key=_event_key)
        return iter(events)

    def count(self) -> int:
        return sum(1 for _ in self)

    def for_day(self, day: date) -> "CalendarView":
        """Narrow the view to one local calendar day."""
        day_start = to_local(datetime.combine(day, time.min))
        day_end = to_local(datetime.combine(day + timedelta(days=1), time.min))
        return CalendarView(
            self.owner_id,
            max(self.range_start, day_start),
            min(self.range_end, day_end),
            self._sources,
            self._registry,
        )

    def by_day(self) -> "OrderedDict[date, List[DisplayEvent]]":
        grouped: "OrderedDict[date, List[DisplayEvent]]" = OrderedDict()
        for event in self:
            grouped.setdefault(event.appointment.date, []).append(event)
        return grouped

    def legend(self) -> Dict[str, str]:
        """Colors of the non-empty locations that appear in this view."""
        return {
            event.appointment.location: event.color
            for event in self
            if event.appointment.location
        }


def build_view(
    owner_id: str,
    range_start: datetime,
    range_end: datetime,
    appointment_sources: Sequence[Iterable[Appointment]],
    registry: LocationColorRegistry,
) -> CalendarView:
    """Return the merged view of ``appointment_sources`` for one owner.

    Sources must be re-iterable (lists, tuples or views over a store) for
    the view to be restartable. Inputs are never mutated.
    """
    return CalendarView(owner_id, range_start, range_end, appointment_sources, registry)
