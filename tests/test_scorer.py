from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from departure_gauge.logic.models import GOOD, MODERATE, POOR, Itinerary
from departure_gauge.logic.scorer import band_wait, score

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _itinerary(depart_in: float, duration: int = 20) -> Itinerary:
    departure = NOW + timedelta(minutes=depart_in)
    return Itinerary(
        departure_time=departure,
        arrival_time=departure + timedelta(minutes=duration),
        duration_minutes=duration,
        wait_minutes=max(0, round(depart_in)),
    )


def test_score_no_itineraries() -> None:
    signal = score([], 15, now=NOW)

    assert signal.value == 0
    assert signal.status == POOR
    assert signal.message == "No transit available"
    assert signal.next_departure_time is None


def test_score_no_upcoming_departures() -> None:
    signal = score([_itinerary(-5), _itinerary(0)], 15, now=NOW)

    assert signal.value == 0
    assert signal.status == POOR
    assert signal.message == "No upcoming departures"


def test_score_leave_now() -> None:
    # Departs 20s after the truncated minute, which rounds to a zero wait.
    signal = score([_itinerary(1 / 3)], 15, now=NOW + timedelta(seconds=10))

    assert signal.status == GOOD
    assert signal.value == pytest.approx(100)
    assert signal.message == "Leave now!"


def test_score_good_band() -> None:
    signal = score([_itinerary(5)], 20, now=NOW)

    assert signal.status == GOOD
    assert signal.value == pytest.approx(87.5)
    assert signal.message == "Good time to leave (5 min wait)"


def test_score_moderate_band() -> None:
    signal = score([_itinerary(10)], 20, now=NOW)

    assert signal.status == MODERATE
    assert signal.value == pytest.approx(40 + 45 * (1 - 4 / 8))
    assert signal.message == "Moderate wait (10 min)"


def test_score_long_wait_band() -> None:
    signal = score([_itinerary(18)], 20, now=NOW)

    assert signal.status == POOR
    assert signal.value == pytest.approx(20 + 20 * (1 - 4 / 6))
    assert signal.message == "Long wait (18 min)"


def test_score_very_long_wait() -> None:
    signal = score([_itinerary(50)], 20, now=NOW)

    assert signal.status == POOR
    assert signal.value == 0
    assert signal.message == "Very long wait (50 min)"


def test_score_just_over_budget() -> None:
    signal = score([_itinerary(25)], 20, now=NOW)

    assert signal.status == POOR
    assert signal.value == pytest.approx(15)


def test_score_selects_earliest_future_departure() -> None:
    later = _itinerary(30)
    sooner = _itinerary(4)
    past = _itinerary(-3)

    signal = score([later, past, sooner], 20, now=NOW)

    assert signal.selected_itinerary == sooner
    assert signal.next_departure_time == sooner.departure_time


def test_score_zero_budget_does_not_divide_by_zero() -> None:
    signal = score([_itinerary(3)], 0, now=NOW)

    assert signal.status == POOR
    assert signal.value == pytest.approx(17)


@pytest.mark.parametrize("budget", [1, 7, 15, 20, 60, 120])
def test_value_and_status_stay_consistent(budget: int) -> None:
    for wait in range(0, 200):
        value, status, _ = band_wait(wait, budget)
        assert 0 <= value <= 100
        if status == GOOD:
            assert value >= 85
        elif status == MODERATE:
            assert 40 <= value <= 85
        else:
            assert status == POOR
            assert value <= 40
