"""Tests for appointment constructors and value types."""

from datetime import datetime
from pathlib import Path
import sys

import pytest
import pytz

sys.path.append(str(Path(__file__).resolve().parents[1]))
from docket.domain import models  # noqa: E402
from docket.domain.errors import InvalidAppointmentError, LocationColorError  # noqa: E402


def test_constructors_fill_kind_and_localize() -> None:
    hearing = models.new_hearing(
        owner_id="lawyer_1",
        title="  Bail hearing ",
        location="Court A",
        start=datetime(2030, 1, 7, 10, 0),
        end=datetime(2030, 1, 7, 11, 0),
        participants=["Client X"],
    )
    task = models.new_task(
        owner_id="lawyer_1",
        title="Draft affidavit",
        start=datetime(2030, 1, 7, 12, 0),
        end=datetime(2030, 1, 7, 12, 30),
    )
    meeting = models.new_meeting(
        owner_id="lawyer_1",
        title="Client consult",
        location="Chambers",
        start=datetime(2030, 1, 7, 13, 0),
        end=datetime(2030, 1, 7, 13, 30),
    )

    assert hearing.kind is models.AppointmentKind.HEARING
    assert task.kind is models.AppointmentKind.TASK
    assert meeting.kind is models.AppointmentKind.MEETING
    assert hearing.title == "Bail hearing"
    assert hearing.participants == ("Client X",)
    assert hearing.start.tzinfo is not None
    assert hearing.start.strftime("%H:%M") == "10:00"
    assert task.location == ""
    assert hearing.id is None


def test_aware_datetimes_are_converted_to_owner_zone() -> None:
    hearing = models.new_hearing(
        owner_id="lawyer_1",
        title="Mention",
        location="Court A",
        start=pytz.UTC.localize(datetime(2030, 1, 7, 4, 30)),
        end=pytz.UTC.localize(datetime(2030, 1, 7, 5, 30)),
    )
    # Asia/Colombo is UTC+05:30
    assert hearing.start.strftime("%H:%M") == "10:00"


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"title": "   "}, "title"),
        ({"location": ""}, "location"),
        ({"end": datetime(2030, 1, 8, 10, 0)}, "same day"),
        ({"owner_id": ""}, "owner_id"),
    ],
)
def test_constructor_rejects_malformed_input(kwargs, message) -> None:
    base = dict(
        owner_id="lawyer_1",
        title="Bail hearing",
        location="Court A",
        start=datetime(2030, 1, 7, 10, 0),
        end=datetime(2030, 1, 7, 11, 0),
    )
    base.update(kwargs)
    with pytest.raises(InvalidAppointmentError, match=message):
        models.new_hearing(**base)


def test_equality_is_by_id() -> None:
    a = models.new_task(
        owner_id="o", title="A", start=datetime(2030, 1, 7, 10), end=datetime(2030, 1, 7, 11)
    )
    b = models.new_task(
        owner_id="o", title="A", start=datetime(2030, 1, 7, 10), end=datetime(2030, 1, 7, 11)
    )
    assert a != b
    assert a == a

    from dataclasses import replace

    stored = replace(a, id="appt_1")
    renamed = replace(b, id="appt_1", title="Renamed")
    assert stored == renamed
    assert len({stored, renamed}) == 1


def test_normalize_color() -> None:
    assert models.normalize_color("3b82f6") == "#3B82F6"
    assert models.normalize_color("#ef4444") == "#EF4444"
    with pytest.raises(LocationColorError):
        models.normalize_color("blue")


def test_only_travel_shortfall_is_overridable() -> None:
    overridable = {code for code in models.ReasonCode if code.overridable}
    assert overridable == {models.ReasonCode.INSUFFICIENT_TRAVEL_TIME}
