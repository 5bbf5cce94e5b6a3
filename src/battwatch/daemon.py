#!/usr/bin/env python3
"""
Headless battery monitor.
Runs the status engine on a fixed interval without any GUI; level command
confirmations run on timer threads so ticks stay on schedule.
"""

import logging
import signal
import threading

from . import messages
from .actions import DesktopSink, Notifier
from .engine import StatusEngine
from .sysfs import SysfsSource, discover

logger = logging.getLogger(__name__)


class ThreadScheduler:
    """Delayed callbacks on daemon timer threads."""

    def call_later(self, delay: float, callback) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class HeadlessMonitor:
    """Polls the battery and reports through logs and notifications."""

    def __init__(self, settings, source=None, battery_suffix: str | None = None, scheduler=None):
        self.settings = settings
        self.source = source or SysfsSource()
        self.battery_suffix = battery_suffix
        self.sink = DesktopSink(Notifier(hidden=settings.hide_notification), presenter=self.present)
        self.engine = StatusEngine(settings, self.source, scheduler or ThreadScheduler(), self.sink)
        self.last_line = None
        self._stop = threading.Event()

    def present(self, update):
        line = messages.tooltip_text(
            messages.update_text(update), messages.time_text(update.minutes)
        ).replace("\n", ", ")
        if line != self.last_line:
            self.last_line = line
            logger.info("%s", line)

    def update(self) -> bool:
        """Run one tick; errors are logged and retried next interval."""
        try:
            self.engine.tick(discover(self.source, self.battery_suffix))
        except Exception:
            logger.exception("Update error")
            return False
        return True

    def stop(self, *args):
        self._stop.set()

    def run(self):
        signal.signal(signal.SIGTERM, self.stop)
        signal.signal(signal.SIGINT, self.stop)

        logger.info(
            "Battery monitor started (interval %ds, low %d%%, critical %d%%)",
            self.settings.update_interval,
            self.settings.low_level,
            self.settings.critical_level,
        )
        while not self._stop.is_set():
            self.update()
            self._stop.wait(self.settings.update_interval)

        self.engine.state.cancel_confirmations()
        logger.info("Battery monitor stopped")
