"""Adaptive refresh timer that polls faster as the next departure approaches."""

from __future__ import annotations

from datetime import datetime
import logging
import threading
from typing import Callable, Protocol

from departure_gauge.logic.timeutils import resolve_now, whole_minutes_between

logger = logging.getLogger(__name__)

STOPPED = "STOPPED"
RUNNING = "RUNNING"

# (minutes until departure upper bound, delay seconds)
DELAY_STEPS = ((5, 30), (15, 45), (30, 60))
FAR_DELAY_SECONDS = 120


class TimerHandle(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def _thread_timer(delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    return timer


def compute_delay_ms(
    next_departure_time: datetime | None,
    base_interval_seconds: int,
    now: datetime | None = None,
) -> int:
    """Delay before the next refresh, in milliseconds."""
    if next_departure_time is None:
        return base_interval_seconds * 1000
    minutes = whole_minutes_between(resolve_now(now), next_departure_time)
    for limit, seconds in DELAY_STEPS:
        if minutes <= limit:
            return seconds * 1000
    return FAR_DELAY_SECONDS * 1000


class RefreshScheduler:
    """Owns at most one pending one-shot timer that invokes ``on_update``.

    The timer does not re-arm itself after a successful update; publishing a
    new ``next_departure_time`` (or calling ``start``) arms the next one.
    """

    def __init__(
        self,
        on_update: Callable[[], None],
        base_interval_seconds: int = 60,
        enabled: bool = False,
        clock: Callable[[], datetime] | None = None,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        if base_interval_seconds <= 0:
            raise ValueError("base_interval_seconds must be positive")
        self._on_update = on_update
        self._base_interval_seconds = base_interval_seconds
        self._enabled = enabled
        self._next_departure_time: datetime | None = None
        self._clock = clock or (lambda: resolve_now(None))
        self._timer_factory = timer_factory or _thread_timer
        self._lock = threading.Lock()
        self._timer: TimerHandle | None = None
        self._generation = 0

    @property
    def state(self) -> str:
        with self._lock:
            return RUNNING if self._timer is not None else STOPPED

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        with self._lock:
            was_running = self._enabled and self._timer is not None
            self._enabled = value
            if not value:
                self._cancel_locked()
                return
        if not was_running:
            self.start()

    @property
    def next_departure_time(self) -> datetime | None:
        return self._next_departure_time

    @next_departure_time.setter
    def next_departure_time(self, value: datetime | None) -> None:
        self._next_departure_time = value
        if self._enabled:
            self.start()

    def current_delay_ms(self) -> int:
        return compute_delay_ms(self._next_departure_time, self._base_interval_seconds, self._clock())

    def start(self) -> None:
        """Cancel any pending timer and arm a fresh one, if enabled."""
        if not self._enabled:
            return
        delay_ms = self.current_delay_ms()
        with self._lock:
            if not self._enabled:
                return
            self._cancel_locked()
            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(delay_ms / 1000.0, lambda: self._fire(generation))
            self._timer = timer
            timer.start()
        logger.debug("Refresh armed in %d ms", delay_ms)

    def stop(self) -> None:
        """Cancel the pending timer, if any."""
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
            if not self._enabled:
                return

        try:
            self._on_update()
        except Exception:
            logger.exception("Error during scheduled refresh")
            with self._lock:
                rearm = self._timer is None
            if rearm:
                self.start()


__all__ = ["RefreshScheduler", "compute_delay_ms", "STOPPED", "RUNNING"]
