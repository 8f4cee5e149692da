"""Conflict and travel-time checks of a candidate against an owner's day.

The result is advisory. Overlaps are hard failures that no flag can bypass;
a travel shortfall is a soft failure the caller may override by resubmitting
with ``override_travel_warning=True``; a provider outage degrades to a
non-blocking ``TRAVEL_UNKNOWN`` warning.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Sequence

import pytz

from ..core.config import settings
from ..domain.errors import TravelTimeUnavailableError
from ..domain.models import Appointment, BusinessHours, ReasonCode, ValidationResult
from .constraints import DEFAULT_BUSINESS_HOURS, validate_static
from .travel import TravelTimeProvider, estimate_with_timeout

logger = logging.getLogger(__name__)


def _minutes(seconds: int) -> str:
    return f"{seconds // 60} min" if seconds % 60 == 0 else f"{seconds / 60:.1f} min"


def build_day_sequence(
    candidate: Appointment, existing: Iterable[Appointment]
) -> List[Appointment]:
    """Insert ``candidate`` into the day, ordered by start, end, then id.

    A stored copy of the candidate itself (same id) is dropped so that an
    appointment is never compared with its own persisted row.
    """
    others = [a for a in existing if candidate.id is None or a.id != candidate.id]
    return sorted([*others, candidate], key=lambda a: a.sort_key)


def find_overlap(sequence: Sequence[Appointment]) -> ValidationResult | None:
    """Report the first pair whose ``[start, end)`` intervals intersect.

    The latest-ending appointment seen so far is carried forward, so an
    overlap hidden behind a short appointment is still found.
    """
    if not sequence:
        return None
    latest = sequence[0]
    for appt in sequence[1:]:
        if latest.end > appt.start:
            return ValidationResult.failure(
                ReasonCode.OVERLAP,
                f"{appt.title!r} ({appt.start:%H:%M}-{appt.end:%H:%M}) overlaps "
                f"{latest.title!r} ({latest.start:%H:%M}-{latest.end:%H:%M}).",
            )
        if appt.end > latest.end:
            latest = appt
    return None


def check_travel(
    candidate: Appointment,
    sequence: Sequence[Appointment],
    provider: TravelTimeProvider,
    timeout: float,
) -> ValidationResult:
    """Check the gaps on either side of ``candidate`` against travel time.

    Only the adjacent pairs that contain the candidate are evaluated. Pairs
    of stored appointments are not re-checked, even when one was booked
    with an overridden travel shortfall, so that an earlier override does
    not block later bookings elsewhere in the day. Pairs with an empty or
    identical location need no travel.
    """
    unknown: List[TravelTimeUnavailableError] = []
    for before, after in zip(sequence, sequence[1:]):
        if before is not candidate and after is not candidate:
            continue
        if not before.location or not after.location:
            continue
        if before.location == after.location:
            continue
        gap = int((after.start - before.end).total_seconds())
        try:
            required = estimate_with_timeout(
                provider, before.location, after.location, timeout
            )
        except TravelTimeUnavailableError as exc:
            logger.warning(
                "Travel time unavailable: %s",
                exc,
                extra={
                    "owner_id": candidate.owner_id,
                    "reason_code": ReasonCode.TRAVEL_UNKNOWN.value,
                },
            )
            unknown.append(exc)
            continue
        if gap < required:
            return ValidationResult.failure(
                ReasonCode.INSUFFICIENT_TRAVEL_TIME,
                f"Travelling from {before.location!r} to {after.location!r} takes "
                f"about {_minutes(required)}, but only {_minutes(gap)} separate "
                f"{before.title!r} and {after.title!r}.",
                required_travel_seconds=required,
                available_gap_seconds=gap,
            )

    if unknown:
        routes = ", ".join(f"{e.origin} -> {e.destination}" for e in unknown)
        return ValidationResult(
            valid=True,
            reason_code=ReasonCode.TRAVEL_UNKNOWN,
            message=f"Travel time could not be verified for {routes}; "
            "please confirm the schedule is reachable.",
        )
    return ValidationResult.ok()


def validate_against_schedule(
    candidate: Appointment,
    existing_for_owner_on_date: Iterable[Appointment],
    travel_time_provider: TravelTimeProvider,
    *,
    now: datetime | None = None,
    hours: BusinessHours = DEFAULT_BUSINESS_HOURS,
    override_travel_warning: bool = False,
    timeout: float | None = None,
) -> ValidationResult:
    """Decide whether ``candidate`` fits into the owner's day.

    Static rules run first and short-circuit. Then the day is ordered and
    checked for overlaps (never overridable). Finally, unless
    ``override_travel_warning`` is set, the gaps around the candidate are
    compared with provider travel times.
    """
    now = now or datetime.now(pytz.UTC)
    failure = validate_static(candidate, now, hours)
    if failure is not None:
        return failure

    sequence = build_day_sequence(candidate, existing_for_owner_on_date)
    overlap = find_overlap(sequence)
    if overlap is not None:
        return overlap

    if override_travel_warning:
        return ValidationResult.ok("Appointment can be scheduled; travel check overridden.")
    return check_travel(
        candidate,
        sequence,
        travel_time_provider,
        settings.TRAVEL_TIMEOUT_SECONDS if timeout is None else timeout,
    )
