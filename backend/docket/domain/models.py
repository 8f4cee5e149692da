"""Core domain entities represented as immutable dataclasses.

Appointments are built through the ``new_*`` constructors, which reject
malformed input up front so that every ``Appointment`` reaching the engine
is well formed: tz-aware in the owner's locale, confined to one calendar
day and titled. Business rules (hours, overlaps, travel) are *not* applied
here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, tzinfo
from enum import Enum
from typing import Iterable, Tuple

import pytz

from ..core.config import settings
from .errors import InvalidAppointmentError, LocationColorError

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


class AppointmentKind(str, Enum):
    HEARING = "HEARING"
    TASK = "TASK"
    MEETING = "MEETING"


# Kinds that can be remote and therefore carry no location.
REMOTE_CAPABLE_KINDS = frozenset({AppointmentKind.TASK})


class ReasonCode(str, Enum):
    OK = "OK"
    PAST_DATE = "PAST_DATE"
    OUTSIDE_BUSINESS_HOURS = "OUTSIDE_BUSINESS_HOURS"
    INVALID_RANGE = "INVALID_RANGE"
    OVERLAP = "OVERLAP"
    INSUFFICIENT_TRAVEL_TIME = "INSUFFICIENT_TRAVEL_TIME"
    TRAVEL_UNKNOWN = "TRAVEL_UNKNOWN"
    STORE_CONFLICT = "STORE_CONFLICT"

    @property
    def overridable(self) -> bool:
        return self is ReasonCode.INSUFFICIENT_TRAVEL_TIME


def owner_timezone(name: str | None = None) -> tzinfo:
    """Return the pytz zone appointments are pinned to."""
    return pytz.timezone(name or settings.OWNER_TZ)


def to_local(value: datetime, tz: tzinfo | None = None) -> datetime:
    """Pin ``value`` to ``tz``; naive values are read as local wall time."""
    tz = tz or owner_timezone()
    if value.tzinfo is None:
        return tz.localize(value)  # type: ignore[attr-defined]
    return value.astimezone(tz)


def normalize_color(value: str) -> str:
    """Return ``value`` as ``#RRGGBB`` or raise.

    Example:
        >>> normalize_color("3b82f6")
        '#3B82F6'
    """
    match = _HEX_COLOR.match((value or "").strip())
    if match is None:
        raise LocationColorError(f"not an RGB hex color: {value!r}")
    return "#" + match.group(1).upper()


@dataclass(frozen=True, eq=False)
class Appointment:
    """A hearing, task or meeting on one owner's calendar.

    Equality and hashing go by ``id``; two unsaved candidates (``id`` is
    ``None``) are only equal to themselves.

    Example:
        >>> new_hearing(
        ...     owner_id="lawyer_1",
        ...     title="Bail hearing",
        ...     location="Court A",
        ...     start=datetime(2030, 1, 7, 10, 0),
        ...     end=datetime(2030, 1, 7, 11, 0),
        ... )
    """

    owner_id: str
    kind: AppointmentKind
    title: str
    location: str
    start: datetime
    end: datetime
    id: str | None = None
    case_reference: str | None = None
    status: str = "SCHEDULED"
    note: str = ""
    participants: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def date(self) -> date:
        return self.start.date()

    @property
    def sort_key(self) -> Tuple[datetime, datetime, str]:
        return (self.start, self.end, self.id or "")

    def overlaps(self, other: "Appointment") -> bool:
        return self.start < other.end and other.start < self.end

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Appointment):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)


def _build(
    kind: AppointmentKind,
    *,
    owner_id: str,
    title: str,
    start: datetime,
    end: datetime,
    location: str = "",
    case_reference: str | None = None,
    status: str = "SCHEDULED",
    note: str = "",
    participants: Iterable[str] = (),
    tz: tzinfo | None = None,
) -> Appointment:
    if not owner_id:
        raise InvalidAppointmentError("owner_id is required")
    title = (title or "").strip()
    if not title:
        raise InvalidAppointmentError("title must not be empty")
    if not isinstance(start, datetime) or not isinstance(end, datetime):
        raise InvalidAppointmentError("start and end must be datetimes")
    location = (location or "").strip()
    if not location and kind not in REMOTE_CAPABLE_KINDS:
        raise InvalidAppointmentError(f"a {kind.value.lower()} needs a location")
    start = to_local(start, tz)
    end = to_local(end, tz)
    if start.date() != end.date():
        raise InvalidAppointmentError("start and end must fall on the same day")
    return Appointment(
        owner_id=owner_id,
        kind=kind,
        title=title,
        location=location,
        start=start,
        end=end,
        case_reference=case_reference,
        status=status,
        note=note,
        participants=tuple(participants),
    )


def new_hearing(**kwargs) -> Appointment:
    """Build a court hearing candidate."""
    return _build(AppointmentKind.HEARING, **kwargs)


def new_task(**kwargs) -> Appointment:
    """Build a task candidate; the location may be empty for remote work."""
    return _build(AppointmentKind.TASK, **kwargs)


def new_meeting(**kwargs) -> Appointment:
    """Build a client meeting candidate."""
    return _build(AppointmentKind.MEETING, **kwargs)


CONSTRUCTORS = {
    AppointmentKind.HEARING: new_hearing,
    AppointmentKind.TASK: new_task,
    AppointmentKind.MEETING: new_meeting,
}


@dataclass(frozen=True)
class BusinessHours:
    """Half-open local window ``[start, end)`` appointments must sit in.

    Example:
        >>> BusinessHours.parse("09:30", "15:30")
    """

    start: time = time(9, 30)
    end: time = time(15, 30)

    @classmethod
    def parse(cls, start: str, end: str) -> "BusinessHours":
        try:
            return cls(time.fromisoformat(start), time.fromisoformat(end))
        except ValueError as exc:
            raise InvalidAppointmentError(f"bad business hours {start}-{end}") from exc

    def __str__(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"


@dataclass(frozen=True)
class ValidationResult:
    """Advisory outcome of validating a candidate. Never persisted."""

    valid: bool
    reason_code: ReasonCode
    message: str
    required_travel_seconds: int = 0
    available_gap_seconds: int = 0

    @classmethod
    def ok(cls, message: str = "Appointment can be scheduled.") -> "ValidationResult":
        return cls(valid=True, reason_code=ReasonCode.OK, message=message)

    @classmethod
    def failure(cls, reason_code: ReasonCode, message: str, **kwargs) -> "ValidationResult":
        return cls(valid=False, reason_code=reason_code, message=message, **kwargs)

    @property
    def overridable(self) -> bool:
        return not self.valid and self.reason_code.overridable


@dataclass(frozen=True)
class Booking:
    """A committed appointment and the validation it passed.

    ``advisory`` is ``OK`` or, when some travel estimate was unavailable,
    ``TRAVEL_UNKNOWN`` so the caller can still warn the owner.
    """

    appointment: Appointment
    advisory: ValidationResult


@dataclass(frozen=True)
class LocationColorEntry:
    """Owner-scoped display color for a location name.

    Example:
        >>> LocationColorEntry(owner_id="lawyer_1", location="Court A", color="#EF4444")
    """

    owner_id: str
    location: str
    color: str


@dataclass(frozen=True)
class DisplayEvent:
    """Appointment annotated for rendering on a calendar."""

    appointment: Appointment
    color: str

    @property
    def start(self) -> datetime:
        return self.appointment.start

    @property
    def kind(self) -> AppointmentKind:
        return self.appointment.kind
