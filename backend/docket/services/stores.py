"""Persistence collaborators: appointment and location-color stores.

The in-memory implementations keep the same guarantees a database-backed
store must give. Appointment inserts are atomic per ``(owner, date)`` and
color writes are serialized per owner.
"""

from __future__ import annotations

import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Dict, List, Protocol, Tuple

from ..domain.models import Appointment, LocationColorEntry

DayKey = Tuple[str, date]


@dataclass(frozen=True)
class InsertOutcome:
    """Result of ``insert_if_non_conflicting``."""

    appointment: Appointment | None = None
    conflict_with: Appointment | None = None
    stale: bool = False

    @property
    def success(self) -> bool:
        return self.appointment is not None


class AppointmentStore(Protocol):
    def list_for_owner_on_date(self, owner_id: str, day: date) -> List[Appointment]: ...

    def snapshot(self, owner_id: str, day: date) -> Tuple[List[Appointment], int]: ...

    def insert_if_non_conflicting(
        self, appointment: Appointment, expected_revision: int | None = None
    ) -> InsertOutcome: ...

    def list_for_owner_between(
        self, owner_id: str, start: datetime, end: datetime
    ) -> List[Appointment]: ...

    def get(self, owner_id: str, appointment_id: str) -> Appointment | None: ...

    def delete(self, appointment: Appointment) -> None: ...


class LocationColorStore(Protocol):
    def get(self, owner_id: str, location: str) -> LocationColorEntry | None: ...

    def put(self, entry: LocationColorEntry) -> None: ...

    def delete(self, owner_id: str, location: str) -> None: ...

    def list(self, owner_id: str) -> List[LocationColorEntry]: ...


class InMemoryAppointmentStore:
    """Thread-safe appointment store partitioned by owner and local date."""

    def __init__(self) -> None:
        self._days: Dict[DayKey, List[Appointment]] = defaultdict(list)
        self._revisions: Dict[DayKey, int] = defaultdict(int)
        self._locks: Dict[DayKey, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: DayKey) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(key, threading.Lock())

    def list_for_owner_on_date(self, owner_id: str, day: date) -> List[Appointment]:
        return self.snapshot(owner_id, day)[0]

    def snapshot(self, owner_id: str, day: date) -> Tuple[List[Appointment], int]:
        """Return the day's appointments with the revision they were read at."""
        key = (owner_id, day)
        with self._lock_for(key):
            return list(self._days.get(key, ())), self._revisions.get(key, 0)

    def insert_if_non_conflicting(
        self, appointment: Appointment, expected_revision: int | None = None
    ) -> InsertOutcome:
        """Store ``appointment`` unless it collides with what is already there.

        Under the day lock the candidate is refused when it overlaps a stored
        appointment, or when ``expected_revision`` is given and the day has
        changed since that snapshot was taken.
        """
        key = (appointment.owner_id, appointment.date)
        with self._lock_for(key):
            day = self._days.get(key, [])
            for other in day:
                if other.overlaps(appointment):
                    return InsertOutcome(conflict_with=other)
            if expected_revision is not None and expected_revision != self._revisions[key]:
                return InsertOutcome(stale=True)
            stored = replace(appointment, id=appointment.id or uuid.uuid4().hex)
            # Readers iterate without the lock, so the day list is replaced, never mutated.
            self._days[key] = sorted([*day, stored], key=lambda a: a.sort_key)
            self._revisions[key] += 1
            return InsertOutcome(appointment=stored)

    def get(self, owner_id: str, appointment_id: str) -> Appointment | None:
        for (owner, _), day in list(self._days.items()):
            if owner != owner_id:
                continue
            for appt in day:
                if appt.id == appointment_id:
                    return appt
        return None

    def delete(self, appointment: Appointment) -> None:
        key = (appointment.owner_id, appointment.date)
        with self._lock_for(key):
            day = self._days.get(key, [])
            remaining = [a for a in day if a.id != appointment.id]
            if len(remaining) != len(day):
                self._days[key] = remaining
                self._revisions[key] += 1

    def list_for_owner_between(
        self, owner_id: str, start: datetime, end: datetime
    ) -> List[Appointment]:
        found: List[Appointment] = []
        for (owner, _), appts in list(self._days.items()):
            if owner != owner_id:
                continue
            found.extend(a for a in appts if start <= a.start < end)
        return sorted(found, key=lambda a: a.sort_key)


class InMemoryLocationColorStore:
    """Location colors keyed by ``(owner, location)``; writes lock per owner."""

    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, LocationColorEntry]] = defaultdict(dict)
        self._locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def _lock_for(self, owner_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[owner_id]

    def get(self, owner_id: str, location: str) -> LocationColorEntry | None:
        return self._entries.get(owner_id, {}).get(location)

    def put(self, entry: LocationColorEntry) -> None:
        with self._lock_for(entry.owner_id):
            self._entries[entry.owner_id][entry.location] = entry

    def delete(self, owner_id: str, location: str) -> None:
        with self._lock_for(owner_id):
            self._entries.get(owner_id, {}).pop(location, None)

    def list(self, owner_id: str) -> List[LocationColorEntry]:
        return list(self._entries.get(owner_id, {}).values())
