from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from departure_gauge.logic.frequency import analyze, find_departure_windows
from departure_gauge.logic.models import Itinerary

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _itinerary(depart_in: float) -> Itinerary:
    departure = NOW + timedelta(minutes=depart_in)
    return Itinerary(
        departure_time=departure,
        arrival_time=departure + timedelta(minutes=25),
        duration_minutes=25,
        wait_minutes=max(0, round(depart_in)),
    )


def _at(*offsets: float) -> list[Itinerary]:
    return [_itinerary(offset) for offset in offsets]


def test_single_itinerary_has_no_headway() -> None:
    only = _itinerary(7)
    profile = analyze([only], now=NOW)

    assert profile.average_headway_minutes == 0
    assert profile.is_peak is False
    assert profile.next_departures == (only.departure_time,)


def test_no_itineraries() -> None:
    profile = analyze([], now=NOW)

    assert profile.average_headway_minutes == 0
    assert profile.next_departures == ()


def test_average_of_regular_gaps_is_peak() -> None:
    profile = analyze(_at(20, 0, 10), now=NOW)

    assert profile.average_headway_minutes == pytest.approx(10)
    assert profile.is_peak is True


def test_gap_of_119_minutes_is_averaged() -> None:
    profile = analyze(_at(0, 10, 129), now=NOW)

    assert profile.average_headway_minutes == pytest.approx((10 + 119) / 2)
    assert profile.is_peak is False


def test_gap_of_125_minutes_is_discarded() -> None:
    profile = analyze(_at(0, 10, 20, 145), now=NOW)

    assert profile.average_headway_minutes == pytest.approx(10)
    assert profile.is_peak is True


def test_gap_of_exactly_120_minutes_is_discarded() -> None:
    profile = analyze(_at(0, 10, 130), now=NOW)

    assert profile.average_headway_minutes == pytest.approx(10)


def test_all_gaps_discarded_falls_back_to_an_hour() -> None:
    profile = analyze(_at(5, 5, 200), now=NOW)

    assert profile.average_headway_minutes == 60
    assert profile.is_peak is False


def test_next_departures_only_future_and_at_most_three() -> None:
    itineraries = _at(-10, 0, 3, 8, 14, 22)

    profile = analyze(itineraries, now=NOW)

    assert profile.next_departures == tuple(
        NOW + timedelta(minutes=offset) for offset in (3, 8, 14)
    )


def test_departure_windows_within_budget() -> None:
    itineraries = _at(2, 10, 40, 50, 95)

    windows = find_departure_windows(itineraries, max_wait_minutes=6, now=NOW)

    assert [w.start for w in windows] == [
        NOW,
        NOW + timedelta(minutes=45),
        NOW + timedelta(minutes=90),
    ]
    assert windows[0].average_wait_minutes == pytest.approx(6)
    assert windows[0].end == NOW + timedelta(minutes=15)


def test_departure_windows_empty_without_itineraries() -> None:
    assert find_departure_windows([], 15, now=NOW) == []
