"""Service frequency analysis over normalized itineraries."""

from __future__ import annotations

from datetime import datetime, timedelta
from statistics import mean
from typing import Sequence

from departure_gauge.logic.models import DepartureWindow, FrequencyProfile, Itinerary
from departure_gauge.logic.timeutils import (
    resolve_now,
    truncate_to_minute,
    wait_minutes,
    whole_minutes_between,
)

MAX_HEADWAY_GAP_MIN = 120
FALLBACK_HEADWAY_MIN = 60.0
PEAK_HEADWAY_MIN = 15.0
NEXT_DEPARTURES_COUNT = 3


def analyze(itineraries: Sequence[Itinerary], now: datetime | None = None) -> FrequencyProfile:
    """Compute mean headway, a peak flag and the next few departures."""
    if len(itineraries) < 2:
        return FrequencyProfile(
            average_headway_minutes=0.0,
            is_peak=False,
            next_departures=tuple(it.departure_time for it in itineraries),
        )

    ordered = sorted(itineraries, key=lambda it: it.departure_time)
    gaps = [
        whole_minutes_between(prev.departure_time, curr.departure_time)
        for prev, curr in zip(ordered, ordered[1:])
    ]
    # Zero gaps are duplicates; very long ones usually span a service break.
    usable = [gap for gap in gaps if 0 < gap < MAX_HEADWAY_GAP_MIN]
    average = float(mean(usable)) if usable else FALLBACK_HEADWAY_MIN

    now = truncate_to_minute(resolve_now(now))
    upcoming = [it.departure_time for it in ordered if it.departure_time > now]

    return FrequencyProfile(
        average_headway_minutes=average,
        is_peak=average < PEAK_HEADWAY_MIN,
        next_departures=tuple(upcoming[:NEXT_DEPARTURES_COUNT]),
    )


def find_departure_windows(
    itineraries: Sequence[Itinerary],
    max_wait_minutes: float,
    now: datetime | None = None,
    window_minutes: int = 120,
    slot_minutes: int = 15,
) -> list[DepartureWindow]:
    """Slots over the coming horizon whose average wait fits the budget."""
    now = truncate_to_minute(resolve_now(now))
    windows: list[DepartureWindow] = []
    for offset in range(0, window_minutes, slot_minutes):
        start = now + timedelta(minutes=offset)
        end = start + timedelta(minutes=slot_minutes)
        in_slot = [it for it in itineraries if start <= it.departure_time < end]
        if not in_slot:
            continue
        average_wait = mean(wait_minutes(it.departure_time, start) for it in in_slot)
        if average_wait <= max_wait_minutes:
            windows.append(DepartureWindow(start=start, end=end, average_wait_minutes=float(average_wait)))
    return windows


__all__ = ["analyze", "find_departure_windows"]
