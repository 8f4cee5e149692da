"""Two-phase validate/commit flow tying the engine to the stores."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

import pytz

from ..domain.errors import AppointmentRejectedError
from ..domain.models import (
    Appointment,
    Booking,
    BusinessHours,
    ReasonCode,
    ValidationResult,
    to_local,
)
from .calendar import CalendarView, build_view
from .colors import LocationColorRegistry
from .conflicts import validate_against_schedule
from .constraints import DEFAULT_BUSINESS_HOURS
from .stores import AppointmentStore
from .travel import TravelTimeProvider

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(pytz.UTC)


class SchedulingService:
    """Validate candidates for fast feedback and commit them atomically.

    ``create`` re-runs the full validation against a fresh snapshot and
    hands the snapshot revision to the store, so a booking that raced
    another one on the same day loses with ``STORE_CONFLICT`` instead of
    double-booking the owner.
    """

    def __init__(
        self,
        store: AppointmentStore,
        travel_provider: TravelTimeProvider,
        registry: LocationColorRegistry,
        *,
        clock: Clock = utcnow,
        hours: BusinessHours = DEFAULT_BUSINESS_HOURS,
        travel_timeout: float | None = None,
    ) -> None:
        self.store = store
        self.travel_provider = travel_provider
        self.registry = registry
        self.clock = clock
        self.hours = hours
        self.travel_timeout = travel_timeout

    def _validate(
        self,
        candidate: Appointment,
        existing,
        override_travel_warning: bool = False,
    ) -> ValidationResult:
        return validate_against_schedule(
            candidate,
            existing,
            self.travel_provider,
            now=self.clock(),
            hours=self.hours,
            override_travel_warning=override_travel_warning,
            timeout=self.travel_timeout,
        )

    def validate(self, candidate: Appointment) -> ValidationResult:
        existing = self.store.list_for_owner_on_date(candidate.owner_id, candidate.date)
        return self._validate(candidate, existing)

    def create(
        self, candidate: Appointment, override_travel_warning: bool = False
    ) -> Booking:
        """Persist ``candidate`` or raise ``AppointmentRejectedError``.

        The returned booking keeps the passing validation result, which is
        ``TRAVEL_UNKNOWN`` when a travel estimate could not be had.

        ``override_travel_warning`` skips only the travel check. Overlaps
        and static rules still block.
        """
        existing, revision = self.store.snapshot(candidate.owner_id, candidate.date)
        result = self._validate(candidate, existing, override_travel_warning)
        if not result.valid:
            logger.info(
                "Appointment refused: %s",
                result.message,
                extra={"owner_id": candidate.owner_id, "reason_code": result.reason_code.value},
            )
            raise AppointmentRejectedError(result)

        outcome = self.store.insert_if_non_conflicting(candidate, expected_revision=revision)
        if not outcome.success:
            if outcome.conflict_with is not None:
                message = (
                    f"{candidate.title!r} now collides with {outcome.conflict_with.title!r}, "
                    "which was booked in the meantime. Reload the schedule and try again."
                )
            else:
                message = (
                    "The schedule for this day changed while the appointment was being "
                    "validated. Reload the schedule and try again."
                )
            conflict = ValidationResult.failure(ReasonCode.STORE_CONFLICT, message)
            logger.info(
                "Appointment commit lost a race",
                extra={"owner_id": candidate.owner_id, "reason_code": conflict.reason_code.value},
            )
            raise AppointmentRejectedError(conflict)

        stored = outcome.appointment
        logger.info(
            "Appointment created",
            extra={
                "owner_id": stored.owner_id,
                "appointment_id": stored.id,
                "reason_code": result.reason_code.value,
            },
        )
        return Booking(appointment=stored, advisory=result)

    def get(self, owner_id: str, appointment_id: str) -> Appointment | None:
        return self.store.get(owner_id, appointment_id)

    def cancel(self, owner_id: str, appointment_id: str) -> bool:
        """Delete a stored appointment; returns ``False`` if it was not found."""
        appt = self.store.get(owner_id, appointment_id)
        if appt is None:
            return False
        self.store.delete(appt)
        logger.info(
            "Appointment deleted",
            extra={"owner_id": owner_id, "appointment_id": appointment_id},
        )
        return True

    def calendar(self, owner_id: str, start: datetime, end: datetime) -> CalendarView:
        start, end = to_local(start), to_local(end)
        source = _StoreRange(self.store, owner_id, start, end)
        return build_view(owner_id, start, end, [source], self.registry)


class _StoreRange:
    """Re-iterable window over one owner's stored appointments."""

    def __init__(self, store: AppointmentStore, owner_id: str, start: datetime, end: datetime):
        self._store = store
        self._owner_id = owner_id
        self._start = start
        self._end = end

    def __iter__(self):
        return iter(self._store.list_for_owner_between(self._owner_id, self._start, self._end))
