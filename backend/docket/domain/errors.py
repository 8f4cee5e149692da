"""Exceptions raised by the scheduling engine and its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ValidationResult


class SchedulingError(Exception):
    """Base class for all scheduling errors."""


class InvalidAppointmentError(SchedulingError, ValueError):
    """A candidate appointment is malformed and cannot be built."""


class LocationColorError(SchedulingError, ValueError):
    """A location-color entry has an empty location or a malformed color."""


class StoreUnavailableError(SchedulingError):
    """Persistence is temporarily unreachable; the write did not happen."""


class TravelTimeUnavailableError(SchedulingError):
    """The travel-time provider failed, timed out or knows no route."""

    def __init__(self, origin: str, destination: str, reason: str) -> None:
        super().__init__(f"no travel time for {origin!r} -> {destination!r}: {reason}")
        self.origin = origin
        self.destination = destination
        self.reason = reason


class AppointmentRejectedError(SchedulingError):
    """A commit was refused; ``result`` explains why."""

    def __init__(self, result: "ValidationResult") -> None:
        super().__init__(result.message)
        self.result = result
