"""Pydantic models used for request and response bodies.

These data transfer objects (DTOs) mirror the domain models but add
validation and serialization helpers for the API layer.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from . import models


class AppointmentIn(BaseModel):
    """Candidate appointment as submitted by a client (no id yet).

    Example:
        >>> AppointmentIn(
        ...     owner_id="lawyer_1",
        ...     kind="HEARING",
        ...     title="Bail hearing",
        ...     location="Court A",
        ...     start=datetime(2030, 1, 7, 10, 0),
        ...     end=datetime(2030, 1, 7, 11, 0),
        ... )
    """

    owner_id: str = Field(min_length=1)
    kind: models.AppointmentKind
    title: str = Field(min_length=1)
    location: str = ""
    start: datetime
    end: datetime
    case_reference: str | None = None
    status: str = "SCHEDULED"
    note: str = ""
    participants: List[str] = []

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "owner_id": "lawyer_1",
                "kind": "HEARING",
                "title": "Bail hearing",
                "location": "Court A",
                "start": "2030-01-07T10:00:00",
                "end": "2030-01-07T11:00:00",
            }
        }

    def to_domain(self) -> models.Appointment:
        """Build the appointment through its kind's constructor."""
        build = models.CONSTRUCTORS[self.kind]
        return build(
            owner_id=self.owner_id,
            title=self.title,
            location=self.location,
            start=self.start,
            end=self.end,
            case_reference=self.case_reference,
            status=self.status,
            note=self.note,
            participants=self.participants,
        )


class AppointmentCreate(AppointmentIn):
    """Candidate plus the explicit "proceed anyway" flag.

    Example:
        >>> AppointmentCreate(
        ...     owner_id="lawyer_1",
        ...     kind="TASK",
        ...     title="Draft affidavit",
        ...     start=datetime(2030, 1, 7, 11, 5),
        ...     end=datetime(2030, 1, 7, 11, 30),
        ...     override_travel_warning=True,
        ... )
    """

    override_travel_warning: bool = False


class Appointment(BaseModel):
    """Persisted appointment."""

    id: str
    owner_id: str
    kind: models.AppointmentKind
    title: str
    location: str
    start: datetime
    end: datetime
    case_reference: str | None = None
    status: str
    note: str
    participants: List[str]

    class Config:
        frozen = True

    @classmethod
    def from_domain(cls, appt: models.Appointment) -> "Appointment":
        return cls(
            id=appt.id,
            owner_id=appt.owner_id,
            kind=appt.kind,
            title=appt.title,
            location=appt.location,
            start=appt.start,
            end=appt.end,
            case_reference=appt.case_reference,
            status=appt.status,
            note=appt.note,
            participants=list(appt.participants),
        )


class ValidationResult(BaseModel):
    """Advisory validation outcome.

    Example:
        >>> ValidationResult(
        ...     valid=False,
        ...     reason_code="INSUFFICIENT_TRAVEL_TIME",
        ...     message="...",
        ...     required_travel_seconds=1800,
        ...     available_gap_seconds=300,
        ...     overridable=True,
        ... )
    """

    valid: bool
    reason_code: models.ReasonCode
    message: str
    required_travel_seconds: int = 0
    available_gap_seconds: int = 0
    overridable: bool = False

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "valid": False,
                "reason_code": "INSUFFICIENT_TRAVEL_TIME",
                "message": "Travelling from 'Court A' to 'Court B' takes about 30 min, "
                "but only 5 min separate 'Bail hearing' and 'Witness prep'.",
                "required_travel_seconds": 1800,
                "available_gap_seconds": 300,
                "overridable": True,
            }
        }

    @classmethod
    def from_domain(cls, result: models.ValidationResult) -> "ValidationResult":
        return cls(
            valid=result.valid,
            reason_code=result.reason_code,
            message=result.message,
            required_travel_seconds=result.required_travel_seconds,
            available_gap_seconds=result.available_gap_seconds,
            overridable=result.overridable,
        )


class AppointmentCreated(Appointment):
    """Newly booked appointment with the validation it passed.

    ``advisory.reason_code`` is ``TRAVEL_UNKNOWN`` when the booking went
    through without a travel estimate for one of its neighbours.
    """

    advisory: ValidationResult

    @classmethod
    def from_booking(cls, booking: models.Booking) -> "AppointmentCreated":
        return cls(
            **Appointment.from_domain(booking.appointment).model_dump(),
            advisory=ValidationResult.from_domain(booking.advisory),
        )


class DisplayEvent(BaseModel):
    """Calendar entry with its location color."""

    id: str | None
    kind: models.AppointmentKind
    title: str
    location: str
    start: datetime
    end: datetime
    status: str
    case_reference: str | None = None
    color: str

    class Config:
        frozen = True

    @classmethod
    def from_domain(cls, event: models.DisplayEvent) -> "DisplayEvent":
        appt = event.appointment
        return cls(
            id=appt.id,
            kind=appt.kind,
            title=appt.title,
            location=appt.location,
            start=appt.start,
            end=appt.end,
            status=appt.status,
            case_reference=appt.case_reference,
            color=event.color,
        )


class LocationColorIn(BaseModel):
    """Color to assign to a location.

    Example:
        >>> LocationColorIn(color="#EF4444")
    """

    color: str = Field(pattern=r"^#?[0-9a-fA-F]{6}$")

    class Config:
        frozen = True
        json_schema_extra = {"example": {"color": "#EF4444"}}
