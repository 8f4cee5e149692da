"""Tests for the location color registry."""

from pathlib import Path
import sys
import threading

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))
from docket.domain.errors import (  # noqa: E402
    InvalidAppointmentError,
    LocationColorError,
    StoreUnavailableError,
)
from docket.services.colors import LocationColorRegistry  # noqa: E402
from docket.services.stores import InMemoryLocationColorStore  # noqa: E402

GRAY = "#9CA3AF"


def make_registry() -> LocationColorRegistry:
    return LocationColorRegistry(InMemoryLocationColorStore())


def test_unmapped_location_gets_stable_default() -> None:
    registry = make_registry()
    assert registry.get_color("lawyer_1", "Court A") == GRAY
    assert registry.get_color("lawyer_1", "Court A") == GRAY
    assert registry.list_colors("lawyer_1") == {}


def test_set_then_get_returns_value() -> None:
    registry = make_registry()
    registry.set_color("lawyer_1", "Court A", "#EF4444")
    assert registry.get_color("lawyer_1", "Court A") == "#EF4444"


def test_lookup_is_exact_and_owner_scoped() -> None:
    registry = make_registry()
    registry.set_color("lawyer_1", "Court A", "#EF4444")
    assert registry.get_color("lawyer_1", "court a") == GRAY
    assert registry.get_color("lawyer_2", "Court A") == GRAY


def test_upsert_and_list() -> None:
    registry = make_registry()
    registry.set_color("lawyer_1", "Court A", "#EF4444")
    registry.set_color("lawyer_1", "Court A", "#10b981")
    registry.set_color("lawyer_1", "Court B", "#3B82F6")
    assert registry.list_colors("lawyer_1") == {"Court A": "#10B981", "Court B": "#3B82F6"}


def test_remove_is_idempotent() -> None:
    registry = make_registry()
    registry.set_color("lawyer_1", "Court A", "#EF4444")
    registry.remove_color("lawyer_1", "Court A")
    registry.remove_color("lawyer_1", "Court A")
    assert registry.get_color("lawyer_1", "Court A") == GRAY


@pytest.mark.parametrize("location", ["", "   "])
def test_empty_location_rejected(location) -> None:
    with pytest.raises(LocationColorError):
        make_registry().set_color("lawyer_1", location, "#EF4444")


def test_location_is_trimmed_on_write() -> None:
    registry = make_registry()
    entry = registry.set_color("lawyer_1", " Court A ", "#EF4444")
    assert entry.location == "Court A"
    assert registry.get_color("lawyer_1", "Court A") == "#EF4444"
    assert registry.list_colors("lawyer_1") == {"Court A": "#EF4444"}

    registry.remove_color("lawyer_1", "Court A  ")
    assert registry.list_colors("lawyer_1") == {}


def test_color_errors_are_value_errors_not_appointment_errors() -> None:
    with pytest.raises(ValueError) as excinfo:
        make_registry().set_color("lawyer_1", "", "#EF4444")
    assert not isinstance(excinfo.value, InvalidAppointmentError)


def test_bad_color_rejected() -> None:
    with pytest.raises(LocationColorError):
        make_registry().set_color("lawyer_1", "Court A", "red")


class DownStore(InMemoryLocationColorStore):
    def get(self, owner_id, location):
        raise StoreUnavailableError("db down")

    def put(self, entry):
        raise StoreUnavailableError("db down")


def test_store_outage_surfaces_on_write_but_not_read() -> None:
    registry = LocationColorRegistry(DownStore())
    with pytest.raises(StoreUnavailableError):
        registry.set_color("lawyer_1", "Court A", "#EF4444")
    assert registry.get_color("lawyer_1", "Court A") == GRAY


def test_concurrent_writes_keep_every_location() -> None:
    registry = make_registry()
    threads = [
        threading.Thread(
            target=registry.set_color, args=("lawyer_1", f"Court {i}", "#EF4444")
        )
        for i in range(20)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(registry.list_colors("lawyer_1")) == 20
