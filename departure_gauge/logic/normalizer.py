"""Normalize raw routing-provider responses into typed itineraries."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from departure_gauge.logic.models import (
    UNKNOWN_VEHICLE,
    Itinerary,
    LatLng,
    Step,
    Stop,
    TransitStep,
    WalkStep,
)
from departure_gauge.logic.timeutils import (
    parse_duration_to_minutes,
    parse_timestamp,
    resolve_now,
    wait_minutes,
)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _encoded_path(container: dict[str, Any]) -> str | None:
    return _as_dict(container.get("polyline")).get("encodedPolyline")


def _stop(raw: Any) -> Stop:
    stop = _as_dict(raw)
    lat_lng = _as_dict(_as_dict(stop.get("location")).get("latLng"))
    return Stop(
        name=stop.get("name") or "",
        location=LatLng(
            lat=lat_lng.get("latitude") or 0.0,
            lng=lat_lng.get("longitude") or 0.0,
        ),
    )


def _step_duration_seconds(step: dict[str, Any]) -> int:
    # Minute rounding is intentional: "95s" becomes 120 seconds.
    return parse_duration_to_minutes(step.get("staticDuration") or step.get("duration")) * 60


def _normalize_step(step: dict[str, Any]) -> Step:
    duration_seconds = _step_duration_seconds(step)
    distance = step.get("distanceMeters")
    path = _encoded_path(step)

    details = step.get("transitDetails")
    if not details:
        return WalkStep(duration_seconds=duration_seconds, distance_meters=distance, encoded_path=path)

    details = _as_dict(details)
    stop_details = _as_dict(details.get("stopDetails"))
    line = _as_dict(details.get("transitLine"))
    agencies = line.get("agencies") or []
    agency = _as_dict(agencies[0]) if isinstance(agencies, list) and agencies else {}

    return TransitStep(
        duration_seconds=duration_seconds,
        departure_stop=_stop(stop_details.get("departureStop")),
        arrival_stop=_stop(stop_details.get("arrivalStop")),
        line_name=line.get("name") or "",
        line_short_name=line.get("nameShort"),
        vehicle_type=_as_dict(line.get("vehicle")).get("type") or UNKNOWN_VEHICLE,
        departure_time=parse_timestamp(stop_details.get("departureTime")),
        arrival_time=parse_timestamp(stop_details.get("arrivalTime")),
        stop_count=details.get("stopCount") or 0,
        agency_name=agency.get("name"),
        line_color=line.get("color"),
        distance_meters=distance,
        encoded_path=path,
    )


def _stop_time(step: dict[str, Any] | None, key: str) -> datetime | None:
    if step is None:
        return None
    stop_details = _as_dict(_as_dict(step.get("transitDetails")).get("stopDetails"))
    return parse_timestamp(stop_details.get(key))


def _normalize_route(route: dict[str, Any], now: datetime) -> Itinerary | None:
    legs = route.get("legs") or []
    if not isinstance(legs, list) or not legs:
        return None
    leg = _as_dict(legs[0])
    steps = leg.get("steps")
    raw_steps = [s for s in steps if isinstance(s, dict)] if isinstance(steps, list) else []

    first_transit = next((s for s in raw_steps if s.get("transitDetails")), None)
    last_transit = next((s for s in reversed(raw_steps) if s.get("transitDetails")), None)

    duration_minutes = parse_duration_to_minutes(leg.get("duration"))

    # Without a stop-level departure the itinerary is assumed to leave now.
    departure_time = _stop_time(first_transit, "departureTime") or now
    try:
        estimated_arrival = departure_time + timedelta(minutes=duration_minutes)
    except OverflowError:
        estimated_arrival = departure_time
    arrival_time = _stop_time(last_transit, "arrivalTime") or estimated_arrival
    if arrival_time < departure_time:
        arrival_time = estimated_arrival

    return Itinerary(
        departure_time=departure_time,
        arrival_time=arrival_time,
        duration_minutes=duration_minutes,
        wait_minutes=wait_minutes(departure_time, now),
        steps=tuple(_normalize_step(step) for step in raw_steps),
        encoded_path=_encoded_path(route) or _encoded_path(leg),
    )


def normalize(raw_response: dict[str, Any] | None, now: datetime | None = None) -> list[Itinerary]:
    """Convert a computeRoutes response into itineraries, one per route.

    Only the first leg of each route is read. Missing optional fields fall back
    to defaults instead of raising.
    """
    now = resolve_now(now)
    routes = _as_dict(raw_response).get("routes") or []
    if not isinstance(routes, list):
        return []

    itineraries = []
    for route in routes:
        itinerary = _normalize_route(_as_dict(route), now)
        if itinerary is not None:
            itineraries.append(itinerary)
    return itineraries


__all__ = ["normalize"]
