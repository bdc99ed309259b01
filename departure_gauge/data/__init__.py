"""Provider access, refresh scheduling and search sessions."""

from departure_gauge.data.refresh import RefreshScheduler, compute_delay_ms
from departure_gauge.data.routes_client import ProviderUnavailableError, RoutesClient
from departure_gauge.data.session import ComputeRequest, DepartureSession, build_report

__all__ = [
    "ComputeRequest",
    "DepartureSession",
    "ProviderUnavailableError",
    "RefreshScheduler",
    "RoutesClient",
    "build_report",
    "compute_delay_ms",
]
