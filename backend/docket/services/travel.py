"""Travel-time providers and the bounded call the engine makes into them."""

from __future__ import annotations

import csv
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, Protocol, Tuple

import httpx

from ..core.config import Settings
from ..domain.errors import TravelTimeUnavailableError

logger = logging.getLogger(__name__)

# Shared pool for provider calls; a timed-out call is left to finish on its own.
_EXECUTOR = ThreadPoolExecutor(max_workers=8, thread_name_prefix="travel")


class TravelTimeProvider(Protocol):
    def estimate(self, origin: str, destination: str) -> int:
        """Return seconds needed to get from ``origin`` to ``destination``."""


def _pair(origin: str, destination: str) -> FrozenSet[str]:
    return frozenset((origin, destination))


class MatrixTravelTimeProvider:
    """Symmetric lookup table of travel seconds between known locations.

    Example:
        >>> p = MatrixTravelTimeProvider({("Court A", "Court B"): 1800})
        >>> p.estimate("Court B", "Court A")
        1800
    """

    def __init__(self, durations: Mapping[Tuple[str, str], int] | None = None) -> None:
        self._durations: Dict[FrozenSet[str], int] = {}
        for (origin, destination), seconds in (durations or {}).items():
            self._durations[_pair(origin, destination)] = int(seconds)

    @classmethod
    def from_csv(cls, path: str | Path) -> "MatrixTravelTimeProvider":
        """Load rows of ``origin,destination,seconds`` (header required)."""
        durations: Dict[Tuple[str, str], int] = {}
        with open(path, newline="", encoding="utf-8") as fh:
            for row in csv.DictReader(fh):
                durations[(row["origin"].strip(), row["destination"].strip())] = int(
                    row["seconds"]
                )
        logger.info("Loaded %d travel-time pairs from %s", len(durations), path)
        return cls(durations)

    def estimate(self, origin: str, destination: str) -> int:
        if origin == destination:
            return 0
        try:
            return self._durations[_pair(origin, destination)]
        except KeyError:
            raise TravelTimeUnavailableError(origin, destination, "unknown route") from None


class HttpTravelTimeProvider:
    """Ask a routing service ``GET {url}?origin=..&destination=..``.

    The service answers ``{"seconds": <int>}``.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self._client = client or httpx.Client(timeout=timeout)

    def estimate(self, origin: str, destination: str) -> int:
        if origin == destination:
            return 0
        try:
            response = self._client.get(
                self.url, params={"origin": origin, "destination": destination}
            )
            response.raise_for_status()
            return int(response.json()["seconds"])
        except httpx.HTTPError as exc:
            raise TravelTimeUnavailableError(origin, destination, str(exc)) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise TravelTimeUnavailableError(
                origin, destination, f"malformed response: {exc}"
            ) from exc

    def close(self) -> None:
        self._client.close()


class CachingTravelTimeProvider:
    """Memoize another provider per unordered location pair.

    Only successful estimates are cached, so a degraded upstream is retried
    on the next call.
    """

    def __init__(self, inner: TravelTimeProvider) -> None:
        self._inner = inner
        self._cache: Dict[FrozenSet[str], int] = {}
        self._lock = threading.Lock()

    def estimate(self, origin: str, destination: str) -> int:
        if origin == destination:
            return 0
        key = _pair(origin, destination)
        with self._lock:
            if key in self._cache:
                return self._cache[key]
        seconds = self._inner.estimate(origin, destination)
        with self._lock:
            self._cache[key] = seconds
        return seconds

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()


def estimate_with_timeout(
    provider: TravelTimeProvider,
    origin: str,
    destination: str,
    timeout: float,
) -> int:
    """Call ``provider`` but give up after ``timeout`` seconds.

    Any failure, including the timeout, is raised as
    ``TravelTimeUnavailableError``. The call holds no lock of ours.
    """
    if origin == destination:
        return 0
    future = _EXECUTOR.submit(provider.estimate, origin, destination)
    try:
        seconds = future.result(timeout=timeout)
    except FutureTimeout:
        future.cancel()
        raise TravelTimeUnavailableError(
            origin, destination, f"timed out after {timeout:g}s"
        ) from None
    except TravelTimeUnavailableError:
        raise
    except Exception as exc:
        raise TravelTimeUnavailableError(origin, destination, repr(exc)) from exc
    if seconds < 0:
        raise TravelTimeUnavailableError(origin, destination, f"negative estimate {seconds}")
    return int(seconds)


def build_provider(settings: Settings) -> TravelTimeProvider:
    """Create the configured provider wrapped in a cache."""
    if settings.TRAVEL_PROVIDER == "http":
        if not settings.TRAVEL_PROVIDER_URL:
            raise ValueError("TRAVEL_PROVIDER_URL is required for the http provider")
        inner: TravelTimeProvider = HttpTravelTimeProvider(
            settings.TRAVEL_PROVIDER_URL, timeout=settings.TRAVEL_TIMEOUT_SECONDS
        )
    elif settings.TRAVEL_PROVIDER == "matrix":
        if settings.TRAVEL_MATRIX_PATH:
            inner = MatrixTravelTimeProvider.from_csv(settings.TRAVEL_MATRIX_PATH)
        else:
            inner = MatrixTravelTimeProvider()
    else:
        raise ValueError(f"unknown TRAVEL_PROVIDER {settings.TRAVEL_PROVIDER!r}")
    return CachingTravelTimeProvider(inner)
