"""Pure scoring engine: normalization, readiness scoring, frequency analysis."""

from departure_gauge.logic.frequency import analyze, find_departure_windows
from departure_gauge.logic.models import (
    GOOD,
    MODERATE,
    POOR,
    FrequencyProfile,
    Itinerary,
    ReadinessReport,
    ReadinessSignal,
    TransitStep,
    WalkStep,
)
from departure_gauge.logic.normalizer import normalize
from departure_gauge.logic.scorer import score

__all__ = [
    "GOOD",
    "MODERATE",
    "POOR",
    "FrequencyProfile",
    "Itinerary",
    "ReadinessReport",
    "ReadinessSignal",
    "TransitStep",
    "WalkStep",
    "analyze",
    "find_departure_windows",
    "normalize",
    "score",
]
