"""Tests for travel-time providers."""

from pathlib import Path
import sys

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))
from docket.core.config import Settings  # noqa: E402
from docket.domain.errors import TravelTimeUnavailableError  # noqa: E402
from docket.services.travel import (  # noqa: E402
    CachingTravelTimeProvider,
    HttpTravelTimeProvider,
    MatrixTravelTimeProvider,
    build_provider,
    estimate_with_timeout,
)


def test_matrix_is_symmetric_and_zero_for_same_place() -> None:
    provider = MatrixTravelTimeProvider({("Court A", "Court B"): 1800})
    assert provider.estimate("Court A", "Court B") == 1800
    assert provider.estimate("Court B", "Court A") == 1800
    assert provider.estimate("Court C", "Court C") == 0
    with pytest.raises(TravelTimeUnavailableError):
        provider.estimate("Court A", "Court C")


def test_matrix_from_csv(tmp_path) -> None:
    path = tmp_path / "travel.csv"
    path.write_text("origin,destination,seconds\nCourt A, Court B,1200\n", encoding="utf-8")
    provider = MatrixTravelTimeProvider.from_csv(path)
    assert provider.estimate("Court B", "Court A") == 1200


def _http_provider(handler) -> HttpTravelTimeProvider:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpTravelTimeProvider("https://routes.test/estimate", client=client)


def test_http_provider_reads_seconds() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"seconds": 900})

    provider = _http_provider(handler)
    assert provider.estimate("Court A", "Court B") == 900
    assert seen == {"origin": "Court A", "destination": "Court B"}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, json={"detail": "busy"}),
        httpx.Response(200, json={"minutes": 15}),
    ],
)
def test_http_provider_errors_become_unavailable(response) -> None:
    provider = _http_provider(lambda request: response)
    with pytest.raises(TravelTimeUnavailableError):
        provider.estimate("Court A", "Court B")


def test_caching_provider_memoizes_success_only() -> None:
    calls = []

    class Flaky:
        def estimate(self, origin, destination):
            calls.append((origin, destination))
            if len(calls) == 1:
                raise TravelTimeUnavailableError(origin, destination, "blip")
            return 600

    provider = CachingTravelTimeProvider(Flaky())
    with pytest.raises(TravelTimeUnavailableError):
        provider.estimate("Court A", "Court B")
    assert provider.estimate("Court A", "Court B") == 600
    assert provider.estimate("Court B", "Court A") == 600
    assert len(calls) == 2


def test_estimate_with_timeout_wraps_unexpected_errors() -> None:
    class Broken:
        def estimate(self, origin, destination):
            raise RuntimeError("boom")

    with pytest.raises(TravelTimeUnavailableError, match="boom"):
        estimate_with_timeout(Broken(), "Court A", "Court B", timeout=1.0)


def test_estimate_with_timeout_rejects_negative() -> None:
    class Negative:
        def estimate(self, origin, destination):
            return -5

    with pytest.raises(TravelTimeUnavailableError):
        estimate_with_timeout(Negative(), "Court A", "Court B", timeout=1.0)


def test_build_provider_from_settings() -> None:
    provider = build_provider(Settings(TRAVEL_PROVIDER="matrix"))
    assert isinstance(provider, CachingTravelTimeProvider)
    assert provider.estimate("Court A", "Court A") == 0
    with pytest.raises(ValueError):
        build_provider(Settings(TRAVEL_PROVIDER="http"))
    with pytest.raises(ValueError):
        build_provider(Settings(TRAVEL_PROVIDER="carrier-pigeon"))
