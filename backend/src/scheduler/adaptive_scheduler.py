"""
Theme Park Wait Times - Adaptive Scheduler
Runs the ingestion pipeline periodically with a single-flight guard and an
interval that widens while parks are closed and tightens once rides operate.

States:
    Idle --(timer tick / manual trigger)--> Running --(run finished)--> Idle

A trigger that arrives while Running is dropped, never queued. After every
successful run the interval becomes the long value when fewer than
`min_operating_rides` rides were OPERATING, else the short value; a change
cancels the pending timer and re-arms it from that moment. Failed runs record
the error and leave the interval alone.
"""

import threading
from datetime import datetime
from typing import Callable, Optional

from scheduler.liveness import IngestionState, LivenessReporter
from utils.config import (
    POLL_INTERVAL_MINUTES, ACTIVE_POLL_MINUTES, LOW_ACTIVITY_POLL_MINUTES, MIN_OPERATING_RIDES
)
from utils.logger import (
    logger, log_run_start, log_run_skipped, log_run_error, log_interval_change
)
from utils.timezone import utc_now, to_iso_utc


class AdaptiveScheduler:
    """Drives an ingestion pipeline on an adaptive periodic timer."""

    def __init__(
        self,
        pipeline,
        default_poll_minutes: int = POLL_INTERVAL_MINUTES,
        active_poll_minutes: int = ACTIVE_POLL_MINUTES,
        low_activity_poll_minutes: int = LOW_ACTIVITY_POLL_MINUTES,
        min_operating_rides: Optional[int] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Args:
            pipeline: Object with run_once() returning a result with operating_count
            default_poll_minutes: Interval before the first adjustment
            active_poll_minutes: Interval while enough rides are operating
            low_activity_poll_minutes: Interval while too few rides are operating
            min_operating_rides: Threshold; defaults to the pipeline's own gate
            timer_factory: threading.Timer compatible factory (patched in tests)
            clock: Source of the current time for last-success timestamps
        """
        self.pipeline = pipeline
        self.active_poll_minutes = active_poll_minutes
        self.low_activity_poll_minutes = low_activity_poll_minutes
        if min_operating_rides is None:
            min_operating_rides = getattr(pipeline, 'min_operating_rides', MIN_OPERATING_RIDES)
        self.min_operating_rides = min_operating_rides
        self.timer_factory = timer_factory
        self.clock = clock

        self.state = IngestionState(poll_minutes=default_poll_minutes)
        self.liveness = LivenessReporter(self.state)

        self._timer = None
        self._started = False
        self._stopped = False

    @property
    def poll_minutes(self) -> int:
        with self.state.lock:
            return self.state.poll_minutes

    @property
    def is_running(self) -> bool:
        with self.state.lock:
            return self.state.is_running

    def start(self, run_immediately: bool = True) -> Optional[threading.Thread]:
        """
        Arm the periodic timer and optionally kick off one run right away.

        Returns:
            The thread executing the immediate run, if any
        """
        with self.state.lock:
            self._started = True
            self._stopped = False
            self._arm_timer_locked()

        if not run_immediately:
            return None

        thread = threading.Thread(target=self.trigger, name='ingestion-initial-run', daemon=True)
        thread.start()
        return thread

    def stop(self) -> None:
        """Cancel the timer. A run already in flight finishes on its own."""
        with self.state.lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        logger.info("Scheduler stopped")

    def trigger(self) -> bool:
        """
        Run the pipeline once unless a run is already in flight.

        Returns:
            True if the pipeline was executed, False if the trigger was dropped
        """
        with self.state.lock:
            if self.state.is_running:
                log_run_skipped("Previous run still in progress")
                return False
            self.state.is_running = True
            poll_minutes = self.state.poll_minutes

        try:
            log_run_start(getattr(self.pipeline, 'resort_name', None), poll_minutes)
            try:
                result = self.pipeline.run_once()
            except Exception as e:
                log_run_error(e)
                with self.state.lock:
                    self.state.last_error = str(e)
                return True

            self._adjust_interval(result.operating_count)
            with self.state.lock:
                self.state.last_success = to_iso_utc(self.clock())
                self.state.last_error = None
            return True
        finally:
            with self.state.lock:
                self.state.is_running = False

    def _adjust_interval(self, operating_count: int) -> None:
        if operating_count < self.min_operating_rides:
            target = self.low_activity_poll_minutes
        else:
            target = self.active_poll_minutes

        with self.state.lock:
            previous = self.state.poll_minutes
            if previous == target:
                return
            self.state.poll_minutes = target
            self._arm_timer_locked()

        log_interval_change(previous, target, operating_count)

    def _arm_timer_locked(self) -> None:
        """(Re)start the periodic timer at the current interval. Caller holds the lock."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if not self._started or self._stopped:
            return

        timer = self.timer_factory(self.state.poll_minutes * 60, self._on_tick)
        timer.daemon = True
        timer.start()
        self._timer = timer
        logger.info(f"Polling interval set to {self.state.poll_minutes} minutes")

    def _on_tick(self) -> None:
        with self.state.lock:
            if self._stopped:
                return
            # Re-arm first so the cadence does not drift by the run duration
            self._arm_timer_locked()
        self.trigger()
