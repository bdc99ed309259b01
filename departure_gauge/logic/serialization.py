"""JSON-compatible dict codec for the engine's value objects.

Instants are written as ISO 8601 UTC strings with millisecond precision and
read back into aware datetimes, so a report survives a trip through
``json.dumps``/``json.loads`` unchanged to the millisecond.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from departure_gauge.logic.models import (
    TRANSIT,
    FrequencyMeta,
    Itinerary,
    LatLng,
    ReadinessReport,
    ReadinessSignal,
    Step,
    Stop,
    TransitStep,
    WalkStep,
)
from departure_gauge.logic.timeutils import parse_timestamp


def instant_to_str(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def instant_from_str(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"Invalid instant: {value!r}")
    return parsed


def _stop_to_dict(stop: Stop) -> dict[str, Any]:
    return {"name": stop.name, "location": {"lat": stop.location.lat, "lng": stop.location.lng}}


def _stop_from_dict(data: dict[str, Any]) -> Stop:
    location = data.get("location", {})
    return Stop(name=data.get("name", ""), location=LatLng(lat=location.get("lat", 0.0), lng=location.get("lng", 0.0)))


def step_to_dict(step: Step) -> dict[str, Any]:
    data: dict[str, Any] = {
        "mode": step.mode,
        "durationSeconds": step.duration_seconds,
        "distanceMeters": step.distance_meters,
        "encodedPath": step.encoded_path,
    }
    if isinstance(step, TransitStep):
        data["transitDetails"] = {
            "departureStop": _stop_to_dict(step.departure_stop),
            "arrivalStop": _stop_to_dict(step.arrival_stop),
            "lineName": step.line_name,
            "lineShortName": step.line_short_name,
            "vehicleType": step.vehicle_type,
            "departureTime": instant_to_str(step.departure_time),
            "arrivalTime": instant_to_str(step.arrival_time),
            "stopCount": step.stop_count,
            "agencyName": step.agency_name,
            "lineColor": step.line_color,
        }
    return data


def step_from_dict(data: dict[str, Any]) -> Step:
    if data.get("mode") != TRANSIT:
        return WalkStep(
            duration_seconds=data["durationSeconds"],
            distance_meters=data.get("distanceMeters"),
            encoded_path=data.get("encodedPath"),
        )
    details = data["transitDetails"]
    return TransitStep(
        duration_seconds=data["durationSeconds"],
        departure_stop=_stop_from_dict(details["departureStop"]),
        arrival_stop=_stop_from_dict(details["arrivalStop"]),
        line_name=details["lineName"],
        line_short_name=details.get("lineShortName"),
        vehicle_type=details["vehicleType"],
        departure_time=instant_from_str(details.get("departureTime")),
        arrival_time=instant_from_str(details.get("arrivalTime")),
        stop_count=details.get("stopCount", 0),
        agency_name=details.get("agencyName"),
        line_color=details.get("lineColor"),
        distance_meters=data.get("distanceMeters"),
        encoded_path=data.get("encodedPath"),
    )


def itinerary_to_dict(itinerary: Itinerary) -> dict[str, Any]:
    return {
        "departureTime": instant_to_str(itinerary.departure_time),
        "arrivalTime": instant_to_str(itinerary.arrival_time),
        "durationMinutes": itinerary.duration_minutes,
        "waitMinutes": itinerary.wait_minutes,
        "steps": [step_to_dict(step) for step in itinerary.steps],
        "encodedPath": itinerary.encoded_path,
    }


def itinerary_from_dict(data: dict[str, Any]) -> Itinerary:
    return Itinerary(
        departure_time=instant_from_str(data["departureTime"]),
        arrival_time=instant_from_str(data["arrivalTime"]),
        duration_minutes=data["durationMinutes"],
        wait_minutes=data["waitMinutes"],
        steps=tuple(step_from_dict(step) for step in data.get("steps", [])),
        encoded_path=data.get("encodedPath"),
    )


def signal_to_dict(signal: ReadinessSignal) -> dict[str, Any]:
    selected = signal.selected_itinerary
    return {
        "value": signal.value,
        "status": signal.status,
        "message": signal.message,
        "nextDepartureTime": instant_to_str(signal.next_departure_time),
        "route": itinerary_to_dict(selected) if selected is not None else None,
    }


def signal_from_dict(data: dict[str, Any]) -> ReadinessSignal:
    route = data.get("route")
    return ReadinessSignal(
        value=data["value"],
        status=data["status"],
        message=data["message"],
        next_departure_time=instant_from_str(data.get("nextDepartureTime")),
        selected_itinerary=itinerary_from_dict(route) if route is not None else None,
    )


def report_to_dict(report: ReadinessReport) -> dict[str, Any]:
    return {
        "status": signal_to_dict(report.status),
        "routes": [itinerary_to_dict(route) for route in report.routes],
        "frequencyMeta": {
            "averageFrequencyMinutes": report.frequency.average_frequency_minutes,
            "isPeak": report.frequency.is_peak,
        },
    }


def report_from_dict(data: dict[str, Any]) -> ReadinessReport:
    meta = data.get("frequencyMeta", {})
    return ReadinessReport(
        status=signal_from_dict(data["status"]),
        routes=tuple(itinerary_from_dict(route) for route in data.get("routes", [])),
        frequency=FrequencyMeta(
            average_frequency_minutes=meta.get("averageFrequencyMinutes", 0.0),
            is_peak=meta.get("isPeak", False),
        ),
    )


__all__ = [
    "instant_to_str",
    "instant_from_str",
    "step_to_dict",
    "step_from_dict",
    "itinerary_to_dict",
    "itinerary_from_dict",
    "signal_to_dict",
    "signal_from_dict",
    "report_to_dict",
    "report_from_dict",
]
