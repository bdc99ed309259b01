"""Google Routes API client for transit itineraries."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any

import requests

from departure_gauge.logic.serialization import instant_to_str

ROUTES_API_URL = "https://routes.googleapis.com/directions/v2:computeRoutes"
DEFAULT_TRAVEL_MODE = "TRANSIT"
DEFAULT_FIELD_MASK = ",".join(
    [
        "routes.polyline",
        "routes.legs.duration",
        "routes.legs.polyline",
        "routes.legs.steps.transitDetails",
        "routes.legs.steps.staticDuration",
        "routes.legs.steps.distanceMeters",
        "routes.legs.steps.polyline",
    ]
)

logger = logging.getLogger(__name__)


class ProviderUnavailableError(Exception):
    """Raised when the routing provider cannot be reached or rejects a request."""


class RoutesClient:
    """Thin wrapper around computeRoutes using requests."""

    def __init__(
        self,
        api_key: str,
        api_url: str = ROUTES_API_URL,
        field_mask: str = DEFAULT_FIELD_MASK,
        timeout_seconds: float = 10,
        travel_mode: str = DEFAULT_TRAVEL_MODE,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._field_mask = field_mask
        self._timeout_seconds = timeout_seconds
        self._travel_mode = travel_mode

    def compute_routes(
        self,
        origin: str,
        destination: str,
        travel_mode: str | None = None,
        departure_time: datetime | None = None,
    ) -> dict[str, Any]:
        """Request itineraries between two addresses; returns the raw response body."""
        body: dict[str, Any] = {
            "origin": {"address": origin},
            "destination": {"address": destination},
            "travelMode": travel_mode or self._travel_mode,
            "computeAlternativeRoutes": True,
        }
        if departure_time is not None:
            body["departureTime"] = instant_to_str(departure_time)
        return self._post(body)

    def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": self._field_mask,
        }
        try:
            response = requests.post(
                self._api_url, json=body, headers=headers, timeout=self._timeout_seconds
            )
        except requests.RequestException as exc:
            logger.error("Routes request failed: %s", exc)
            raise ProviderUnavailableError(f"Routes API request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        error = data.get("error") if isinstance(data, dict) else None
        if response.status_code != 200 or error:
            detail = f"Status {response.status_code}"
            if isinstance(error, dict) and error.get("message"):
                detail = f"{detail}, {error['message']}"
            elif response.text.strip():
                detail = f"{detail}, Body: {response.text.strip()}"
            logger.error("Routes API error: %s", detail)
            raise ProviderUnavailableError(f"Routes API request failed: {detail}")

        if not isinstance(data, dict):
            raise ProviderUnavailableError("Routes API response was not valid JSON")
        return data


__all__ = [
    "ProviderUnavailableError",
    "RoutesClient",
    "ROUTES_API_URL",
    "DEFAULT_FIELD_MASK",
    "DEFAULT_TRAVEL_MODE",
]
