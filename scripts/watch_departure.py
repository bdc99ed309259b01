"""Watch the departure readiness signal for one origin/destination pair."""

from __future__ import annotations

import argparse
import json
import logging
import time

from departure_gauge.config import AppConfig, load_config
from departure_gauge.data import ComputeRequest, DepartureSession, ProviderUnavailableError, RoutesClient
from departure_gauge.logging_setup import configure_logging
from departure_gauge.logic.models import ReadinessReport
from departure_gauge.logic.serialization import report_to_dict
from departure_gauge.logic.timeutils import format_clock

logger = logging.getLogger("watch_departure")


def _print_report(report: ReadinessReport) -> None:
    status = report.status
    print(
        "readiness_update",
        {
            "status": status.status,
            "value": round(status.value, 1),
            "message": status.message,
            "next_departure": format_clock(status.next_departure_time),
            "avg_frequency_min": round(report.frequency.average_frequency_minutes, 1),
            "peak": report.frequency.is_peak,
        },
        flush=True,
    )


def build_request(args: argparse.Namespace, config: AppConfig) -> ComputeRequest:
    """Search request from CLI arguments; --max-wait overrides the configured default."""
    max_wait = args.max_wait if args.max_wait is not None else config.search.default_max_wait_minutes
    return ComputeRequest(origin=args.origin, destination=args.destination, max_wait_minutes=max_wait)


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("origin", help="Origin address")
    parser.add_argument("destination", help="Destination address")
    parser.add_argument("--max-wait", type=int, default=None, help="Acceptable wait in minutes (1-120)")
    parser.add_argument("--config", default="config/config.yaml", help="Path to config YAML")
    parser.add_argument("--once", action="store_true", help="Fetch once, print the report as JSON and exit")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.log)

    client = RoutesClient(
        api_key=config.routes.api_key,
        api_url=config.routes.api_url,
        field_mask=config.routes.field_mask,
        timeout_seconds=config.routes.timeout_seconds,
        travel_mode=config.routes.travel_mode,
    )
    request = build_request(args, config)

    if args.once:
        session = DepartureSession(client, request, config.refresh.base_interval_seconds)
        try:
            report = session.refresh()
        except ProviderUnavailableError as exc:
            print("provider_unavailable", str(exc), flush=True)
            return 1
        print(json.dumps(report_to_dict(report), indent=2))
        return 0

    session = DepartureSession(
        client,
        request,
        config.refresh.base_interval_seconds,
        on_report=_print_report,
    )
    try:
        session.start()
    except ProviderUnavailableError as exc:
        logger.error("Initial fetch failed, will retry on schedule: %s", exc)

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        return 0
    finally:
        session.stop()


if __name__ == "__main__":
    raise SystemExit(main())
