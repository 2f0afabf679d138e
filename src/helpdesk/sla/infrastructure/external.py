"""
SLA Scheduling
==============

APScheduler wrapper driving the staleness monitor on a fixed cadence.

Starting returns a MonitorHandle; cancelling it stops future ticks. A tick
that has already started runs to completion.
"""

import threading
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from helpdesk.shared.infrastructure.logging import get_logger
from helpdesk.sla.application import StalenessMonitor, ScanSummary

logger = get_logger(__name__)

JOB_ID = "staleness_scan"


class MonitorHandle:
    """
    Cancellation token for a running monitor.

    ``cancel()`` is idempotent and waits for an in-flight tick to finish.
    """

    def __init__(self, scheduler: BackgroundScheduler, period_seconds: float):
        self._scheduler = scheduler
        self.period_seconds = period_seconds
        self._cancelled = threading.Event()
        self._cancel_lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def is_running(self) -> bool:
        return not self.cancelled and self._scheduler.running

    def cancel(self) -> None:
        with self._cancel_lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            if self._scheduler.running:
                self._scheduler.shutdown(wait=True)
        logger.info("Staleness monitor stopped")


class MonitorScheduler:
    """
    Wrapper for APScheduler for background staleness scans.

    Manages the lifecycle of the scheduler and its single interval job.
    """

    def __init__(self, monitor: StalenessMonitor):
        self._monitor = monitor

    def start(self, period_seconds: float) -> MonitorHandle:
        """Schedule ``monitor.scan`` every ``period_seconds``."""
        if period_seconds <= 0:
            raise ValueError("period_seconds must be positive")

        scheduler = BackgroundScheduler(daemon=True)
        handle = MonitorHandle(scheduler, period_seconds)

        scheduler.add_job(
            self._tick,
            "interval",
            seconds=period_seconds,
            args=[handle],
            id=JOB_ID,
            name="Staleness Scan Job",
            max_instances=1,
            coalesce=True,
            misfire_grace_time=max(1, int(period_seconds)),
            replace_existing=True
        )
        scheduler.start()

        logger.info(
            "Staleness monitor started",
            extra={
                "period_seconds": period_seconds,
                "threshold_days": self._monitor.policy.threshold_days
            }
        )
        return handle

    def _tick(self, handle: MonitorHandle) -> Optional[ScanSummary]:
        if handle.cancelled:
            return None
        return self._monitor.scan()
