"""A single origin/destination search that keeps its readiness signal fresh."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
import threading
from typing import Callable, Protocol

from departure_gauge.data.refresh import RefreshScheduler, TimerFactory
from departure_gauge.logic.frequency import analyze
from departure_gauge.logic.models import FrequencyMeta, Itinerary, ReadinessReport
from departure_gauge.logic.normalizer import normalize
from departure_gauge.logic.scorer import score
from departure_gauge.logic.timeutils import resolve_now

MIN_WAIT_BUDGET = 1
MAX_WAIT_BUDGET = 120
DEFAULT_WAIT_BUDGET = 15
REPORTED_ROUTES = 5

logger = logging.getLogger(__name__)


class RoutesProvider(Protocol):
    def compute_routes(self, origin: str, destination: str) -> dict: ...


@dataclass(frozen=True)
class ComputeRequest:
    """Origin, destination and acceptable wait in minutes."""

    origin: str
    destination: str
    max_wait_minutes: int = DEFAULT_WAIT_BUDGET

    def validate(self) -> None:
        if not self.origin.strip():
            raise ValueError("Origin is required")
        if not self.destination.strip():
            raise ValueError("Destination is required")
        if not MIN_WAIT_BUDGET <= self.max_wait_minutes <= MAX_WAIT_BUDGET:
            raise ValueError(
                f"max_wait_minutes must be between {MIN_WAIT_BUDGET} and {MAX_WAIT_BUDGET}, "
                f"got {self.max_wait_minutes}"
            )


def build_report(
    raw_response: dict,
    max_wait_minutes: int,
    now: datetime | None = None,
) -> tuple[ReadinessReport, list[Itinerary]]:
    """Run the full pipeline over one provider response."""
    now = resolve_now(now)
    itineraries = normalize(raw_response, now=now)
    signal = score(itineraries, max_wait_minutes, now=now)
    profile = analyze(itineraries, now=now)
    report = ReadinessReport(
        status=signal,
        routes=tuple(itineraries[:REPORTED_ROUTES]),
        frequency=FrequencyMeta(
            average_frequency_minutes=profile.average_headway_minutes,
            is_peak=profile.is_peak,
        ),
    )
    return report, itineraries


class DepartureSession:
    """Fetches, scores and re-polls itineraries for one search."""

    def __init__(
        self,
        client: RoutesProvider,
        request: ComputeRequest,
        base_interval_seconds: int = 60,
        clock: Callable[[], datetime] | None = None,
        timer_factory: TimerFactory | None = None,
        on_report: Callable[[ReadinessReport], None] | None = None,
    ) -> None:
        request.validate()
        self._client = client
        self._request = request
        self._clock = clock or (lambda: resolve_now(None))
        self._on_report = on_report
        self._lock = threading.Lock()
        self._loading = False
        self._latest: ReadinessReport | None = None
        self._itineraries: list[Itinerary] = []
        self._scheduler = RefreshScheduler(
            on_update=self.refresh,
            base_interval_seconds=base_interval_seconds,
            clock=self._clock,
            timer_factory=timer_factory,
        )

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    @property
    def itineraries(self) -> list[Itinerary]:
        with self._lock:
            return list(self._itineraries)

    def get_latest(self) -> ReadinessReport | None:
        """Return the most recent report, if any."""
        with self._lock:
            return self._latest

    def refresh(self) -> ReadinessReport | None:
        """Fetch and score once; returns None if a fetch is already in flight.

        Raises ProviderUnavailableError when the routing provider fails.
        """
        with self._lock:
            if self._loading:
                logger.debug("Refresh skipped: fetch already in flight")
                return None
            self._loading = True

        try:
            raw = self._client.compute_routes(self._request.origin, self._request.destination)
            report, itineraries = build_report(raw, self._request.max_wait_minutes, now=self._clock())
        finally:
            with self._lock:
                self._loading = False

        with self._lock:
            self._latest = report
            self._itineraries = itineraries

        logger.info(
            "Readiness %s (%.1f): %s",
            report.status.status,
            report.status.value,
            report.status.message,
        )
        if self._on_report is not None:
            self._on_report(report)
        self._scheduler.next_departure_time = report.status.next_departure_time
        return report

    def start(self) -> ReadinessReport | None:
        """Fetch immediately, then keep polling until stopped."""
        self._scheduler.enabled = True
        return self.refresh()

    def stop(self) -> None:
        self._scheduler.enabled = False


__all__ = ["ComputeRequest", "DepartureSession", "build_report"]
