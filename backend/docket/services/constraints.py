"""Static, per-appointment rules checked before any schedule lookup."""

from __future__ import annotations

from datetime import datetime

from ..core.config import settings
from ..domain.models import Appointment, BusinessHours, ReasonCode, ValidationResult, to_local

DEFAULT_BUSINESS_HOURS = BusinessHours.parse(
    settings.BUSINESS_HOURS_START, settings.BUSINESS_HOURS_END
)


def _wall(moment: datetime):
    return moment.time().replace(tzinfo=None)


def _starts_within(moment: datetime, hours: BusinessHours) -> bool:
    return hours.start <= _wall(moment) < hours.end


def _ends_within(moment: datetime, hours: BusinessHours) -> bool:
    # The closing boundary itself is a legal end time.
    return hours.start <= _wall(moment) <= hours.end


def validate_static(
    appointment: Appointment,
    now: datetime,
    hours: BusinessHours = DEFAULT_BUSINESS_HOURS,
) -> ValidationResult | None:
    """Return the first rule the appointment breaks, or ``None`` if it passes.

    Rules run in a fixed order and short-circuit:

    1. the appointment's date is today or later (``PAST_DATE``);
    2. start and end both lie inside the business window
       (``OUTSIDE_BUSINESS_HOURS``);
    3. start is before end (``INVALID_RANGE``).

    ``now`` is read in the appointment's own timezone so the "today"
    boundary is the owner's, not the server's. Nothing is clamped or
    coerced.
    """
    today = to_local(now, appointment.start.tzinfo).date()
    if appointment.date < today:
        return ValidationResult.failure(
            ReasonCode.PAST_DATE,
            f"{appointment.title!r} is dated {appointment.date:%Y-%m-%d}, "
            f"which is before today ({today:%Y-%m-%d}).",
        )

    if not _starts_within(appointment.start, hours):
        return ValidationResult.failure(
            ReasonCode.OUTSIDE_BUSINESS_HOURS,
            f"{appointment.title!r} starts at {appointment.start:%H:%M}, "
            f"outside business hours {hours}.",
        )
    if not _ends_within(appointment.end, hours):
        return ValidationResult.failure(
            ReasonCode.OUTSIDE_BUSINESS_HOURS,
            f"{appointment.title!r} ends at {appointment.end:%H:%M}, "
            f"outside business hours {hours}.",
        )

    if appointment.start >= appointment.end:
        return ValidationResult.failure(
            ReasonCode.INVALID_RANGE,
            f"{appointment.title!r} must start before it ends "
            f"({appointment.start:%H:%M} >= {appointment.end:%H:%M}).",
        )
    return None
