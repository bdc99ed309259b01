"""Typed value objects produced by the normalizer and scorer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

WALK = "WALK"
TRANSIT = "TRANSIT"

GOOD = "GOOD"
MODERATE = "MODERATE"
POOR = "POOR"

UNKNOWN_VEHICLE = "UNKNOWN"


@dataclass(frozen=True)
class LatLng:
    lat: float = 0.0
    lng: float = 0.0


@dataclass(frozen=True)
class Stop:
    name: str = ""
    location: LatLng = field(default_factory=LatLng)


@dataclass(frozen=True)
class WalkStep:
    """Walking segment of an itinerary."""

    duration_seconds: int
    distance_meters: int | None = None
    encoded_path: str | None = None
    mode: str = field(default=WALK, init=False)


@dataclass(frozen=True)
class TransitStep:
    """Riding segment of an itinerary, with stop and line details."""

    duration_seconds: int
    departure_stop: Stop
    arrival_stop: Stop
    line_name: str
    vehicle_type: str = UNKNOWN_VEHICLE
    line_short_name: str | None = None
    departure_time: datetime | None = None
    arrival_time: datetime | None = None
    stop_count: int = 0
    agency_name: str | None = None
    line_color: str | None = None
    distance_meters: int | None = None
    encoded_path: str | None = None
    mode: str = field(default=TRANSIT, init=False)


Step = Union[WalkStep, TransitStep]


@dataclass(frozen=True)
class Itinerary:
    """One point-to-point journey option."""

    departure_time: datetime
    arrival_time: datetime
    duration_minutes: int
    wait_minutes: int
    steps: tuple[Step, ...] = ()
    encoded_path: str | None = None

    @property
    def transit_steps(self) -> tuple[TransitStep, ...]:
        return tuple(step for step in self.steps if isinstance(step, TransitStep))


@dataclass(frozen=True)
class ReadinessSignal:
    """Gauge value (0-100) with its coarse status and rider-facing message."""

    value: float
    status: str
    message: str
    next_departure_time: datetime | None = None
    selected_itinerary: Itinerary | None = None


@dataclass(frozen=True)
class FrequencyProfile:
    average_headway_minutes: float
    is_peak: bool
    next_departures: tuple[datetime, ...] = ()


@dataclass(frozen=True)
class DepartureWindow:
    start: datetime
    end: datetime
    average_wait_minutes: float


@dataclass(frozen=True)
class FrequencyMeta:
    average_frequency_minutes: float
    is_peak: bool


@dataclass(frozen=True)
class ReadinessReport:
    """Outbound payload handed to the presentation layer."""

    status: ReadinessSignal
    routes: tuple[Itinerary, ...]
    frequency: FrequencyMeta


__all__ = [
    "WALK",
    "TRANSIT",
    "GOOD",
    "MODERATE",
    "POOR",
    "UNKNOWN_VEHICLE",
    "LatLng",
    "Stop",
    "WalkStep",
    "TransitStep",
    "Step",
    "Itinerary",
    "ReadinessSignal",
    "FrequencyProfile",
    "DepartureWindow",
    "FrequencyMeta",
    "ReadinessReport",
]
