"""Departure readiness scoring for normalized itineraries."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from departure_gauge.logic.models import GOOD, MODERATE, POOR, Itinerary, ReadinessSignal
from departure_gauge.logic.timeutils import resolve_now, truncate_to_minute, wait_minutes

GOOD_BAND_FRACTION = 0.3
MODERATE_BAND_FRACTION = 0.7

GOOD_FLOOR = 85.0
MODERATE_FLOOR = 40.0
POOR_FLOOR = 20.0
MAX_VALUE = 100.0


def next_viable(itineraries: Sequence[Itinerary], now: datetime) -> Itinerary | None:
    """Earliest itinerary departing strictly after now (stable on ties)."""
    for itinerary in sorted(itineraries, key=lambda it: it.departure_time):
        if itinerary.departure_time > now:
            return itinerary
    return None


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def band_wait(wait: int, max_wait_minutes: float) -> tuple[float, str, str]:
    """Map a wait in minutes onto (value, status, message) for a wait budget."""
    budget = float(max_wait_minutes)
    if budget <= 0:
        if wait <= 0:
            return MAX_VALUE, GOOD, "Leave now!"
        return max(0.0, POOR_FLOOR - (wait - budget)), POOR, f"Very long wait ({wait} min)"

    good_limit = budget * GOOD_BAND_FRACTION
    moderate_limit = budget * MODERATE_BAND_FRACTION

    if wait <= good_limit:
        value = GOOD_FLOOR + (MAX_VALUE - GOOD_FLOOR) * (1 - wait / good_limit)
        value = _clamp(value, GOOD_FLOOR, MAX_VALUE)
        message = "Leave now!" if wait == 0 else f"Good time to leave ({wait} min wait)"
        return value, GOOD, message

    if wait <= moderate_limit:
        progress = (wait - good_limit) / (moderate_limit - good_limit)
        value = MODERATE_FLOOR + (GOOD_FLOOR - MODERATE_FLOOR) * (1 - progress)
        value = _clamp(value, MODERATE_FLOOR, GOOD_FLOOR)
        return value, MODERATE, f"Moderate wait ({wait} min)"

    if wait <= budget:
        progress = (wait - moderate_limit) / (budget - moderate_limit)
        value = POOR_FLOOR + (MODERATE_FLOOR - POOR_FLOOR) * (1 - progress)
        value = _clamp(value, POOR_FLOOR, MODERATE_FLOOR)
        return value, POOR, f"Long wait ({wait} min)"

    return max(0.0, POOR_FLOOR - (wait - budget)), POOR, f"Very long wait ({wait} min)"


def score(
    itineraries: Sequence[Itinerary],
    max_wait_minutes: float,
    now: datetime | None = None,
) -> ReadinessSignal:
    """Score how good a moment it is to leave, given a wait budget in minutes."""
    if not itineraries:
        return ReadinessSignal(0.0, POOR, "No transit available")

    now = truncate_to_minute(resolve_now(now))
    selected = next_viable(itineraries, now)
    if selected is None:
        return ReadinessSignal(0.0, POOR, "No upcoming departures")

    wait = wait_minutes(selected.departure_time, now)
    value, status, message = band_wait(wait, max_wait_minutes)
    return ReadinessSignal(
        value=value,
        status=status,
        message=message,
        next_departure_time=selected.departure_time,
        selected_itinerary=selected,
    )


__all__ = ["score", "band_wait", "next_viable"]
