"""
Battery status state machine.

Driven once per tick with the currently detected power supplies. Tracks the
battery status, applies low/critical hysteresis and schedules delayed,
re-verified command requests. Presentation, notifications and command
execution are delegated to a sink.
"""

import logging
import threading
from dataclasses import dataclass, field
from functools import partial

from . import messages
from .filter import RateFilters
from .models import (
    DISCHARGING_FAMILY,
    BatteryStatus,
    Category,
    DeviceSet,
    Level,
    NotificationEvent,
    PresentationUpdate,
    SpawnRequest,
)
from .reading import BatteryReader
from .sysfs import read_ac_online, read_battery_present, read_battery_status

logger = logging.getLogger(__name__)

# Seconds to wait before re-checking the status and running a level command
SPAWN_DELAYS = {Level.LOW: 5, Level.CRITICAL: 30}

# Unknown status with AC online is reported as charged from this level on
CHARGED_WORKAROUND_LEVEL = 99

FIXED_PERCENTAGE = {
    BatteryStatus.MISSING: 0,
    BatteryStatus.UNKNOWN: 0,
    BatteryStatus.CHARGED: 100,
}


class Confirmation:
    """A scheduled level command; only the one stored in EngineState may run."""

    def __init__(self, level: Level):
        self.level = level
        self.handle = None

    def cancel(self):
        if self.handle is not None:
            self.handle.cancel()


@dataclass
class EngineState:
    """
    Everything the engine remembers between ticks.

    previous_status is None until a status has been reported for the
    current set of devices.
    """

    previous_status: BatteryStatus | None = None
    ac_only_notified: bool = False
    low_notified: bool = False
    critical_notified: bool = False
    low_spawn_pending: bool = False
    critical_spawn_pending: bool = False
    devices: DeviceSet | None = None
    filters: RateFilters = field(default_factory=RateFilters)
    confirmations: dict = field(default_factory=dict)

    def reset_hysteresis(self):
        self.low_notified = False
        self.critical_notified = False
        self.low_spawn_pending = False
        self.critical_spawn_pending = False

    def cancel_confirmations(self):
        for level, pending in list(self.confirmations.items()):
            logger.info("Cancelling pending %s battery level command", level.value)
            pending.cancel()
        self.confirmations.clear()


@dataclass
class TickResult:
    presentation: PresentationUpdate | None = None
    notifications: list = field(default_factory=list)
    scheduled: list = field(default_factory=list)


class StatusEngine:
    """
    Status state machine over one battery and one AC adapter.

    Args:
        settings: Object with low_level, critical_level, command_low_level
            and command_critical_level attributes.
        source: Attribute source (read_string/read_number).
        scheduler: Object with call_later(delay, callback) returning a
            handle that has cancel().
        sink: Optional object with present(), notify() and spawn().
        state: Initial state, a fresh EngineState by default.
    """

    def __init__(self, settings, source, scheduler, sink=None, state: EngineState | None = None):
        self.settings = settings
        self.source = source
        self.scheduler = scheduler
        self.sink = sink
        self.state = state or EngineState()
        # ticks and confirmations may run on different threads
        self._lock = threading.Lock()

    def tick(self, devices: DeviceSet) -> TickResult:
        with self._lock:
            result = self._tick(devices)

        if self.sink is not None:
            if result.presentation is not None:
                self.sink.present(result.presentation)
            for event in result.notifications:
                self.sink.notify(event)
        return result

    def _tick(self, devices):
        state = self.state
        result = TickResult()

        if state.devices is not None and devices != state.devices:
            logger.info("Power supplies changed: %s -> %s", state.devices, devices)
            state.cancel_confirmations()
            state.reset_hysteresis()
            state.ac_only_notified = False
            state.previous_status = None
        state.devices = devices

        if devices.battery_path is None:
            if not state.ac_only_notified:
                state.ac_only_notified = True
                result.presentation = PresentationUpdate(status=None)
                result.notifications.append(
                    NotificationEvent(
                        category=Category.AC_ONLY,
                        summary=messages.AC_ONLY_TEXT,
                        sticky=True,
                    )
                )
            return result

        status = self._read_status(devices)
        if status is None:
            return result

        reader = BatteryReader(self.source, devices.battery_path, state.filters)
        return self._transition(status, state.previous_status, reader, result)

    def _read_status(self, devices):
        present = read_battery_present(self.source, devices.battery_path)
        if present is None:
            return None
        if not present:
            return BatteryStatus.MISSING

        status = read_battery_status(self.source, devices.battery_path)
        if status != BatteryStatus.UNKNOWN:
            return status

        # some drivers report unknown while on load, guess from the AC state
        ac_online = read_ac_online(self.source, devices.ac_path)
        if ac_online is None:
            return status
        if not ac_online:
            return BatteryStatus.DISCHARGING

        reader = BatteryReader(self.source, devices.battery_path, self.state.filters)
        charge = reader.charge(discharging=False, with_time=False)
        if charge is not None and charge.percentage >= CHARGED_WORKAROUND_LEVEL:
            return BatteryStatus.CHARGED
        return BatteryStatus.CHARGING

    def _transition(self, status, previous, reader, result):
        state = self.state
        discharging = status in DISCHARGING_FAMILY
        was_discharging = previous in DISCHARGING_FAMILY

        if status in FIXED_PERCENTAGE:
            percentage, minutes = FIXED_PERCENTAGE[status], None
        else:
            # rate history from the opposite direction is meaningless
            if (discharging and not was_discharging) or (
                status == BatteryStatus.CHARGING and previous != BatteryStatus.CHARGING
            ):
                state.filters.reset()

            charge = reader.charge(discharging=discharging)
            if charge is None:
                return result
            percentage, minutes = charge.percentage, charge.minutes

        if discharging != was_discharging:
            state.cancel_confirmations()
            state.reset_hysteresis()

        time_str = messages.time_text(minutes)

        if status != previous and not (discharging and was_discharging):
            result.notifications.append(
                NotificationEvent(
                    category=Category.STATUS_CHANGE,
                    summary=messages.battery_text(status, percentage),
                    body=time_str,
                    sticky=status == BatteryStatus.MISSING,
                )
            )
        state.previous_status = status

        if discharging:
            self._check_levels(percentage, time_str, result)
            self._schedule_pending(result)

        level = None
        if state.critical_notified:
            level = Level.CRITICAL
        elif state.low_notified:
            level = Level.LOW

        result.presentation = PresentationUpdate(
            status=status, percentage=percentage, minutes=minutes, level=level
        )
        return result

    def _check_levels(self, percentage, time_str, result):
        state = self.state

        if not state.low_notified and percentage <= self.settings.low_level:
            state.low_notified = True
            state.low_spawn_pending = True
            result.notifications.append(
                NotificationEvent(
                    category=Category.LOW,
                    summary=messages.battery_text(Level.LOW, percentage),
                    body=time_str,
                    sticky=True,
                )
            )

        if not state.critical_notified and percentage <= self.settings.critical_level:
            state.critical_notified = True
            state.critical_spawn_pending = True
            result.notifications.append(
                NotificationEvent(
                    category=Category.CRITICAL,
                    summary=messages.battery_text(Level.CRITICAL, percentage),
                    body=time_str,
                    critical=True,
                    sticky=True,
                )
            )

    def _schedule_pending(self, result):
        state = self.state

        if state.low_spawn_pending:
            state.low_spawn_pending = False
            self._schedule(Level.LOW, self.settings.command_low_level, result)

        if state.critical_spawn_pending:
            state.critical_spawn_pending = False
            self._schedule(Level.CRITICAL, self.settings.command_critical_level, result)

    def _schedule(self, level, command, result):
        if not command:
            return

        delay = SPAWN_DELAYS[level]
        logger.critical(
            "Spawning %s battery level command in %d seconds: %s", level.value, delay, command
        )
        previous = self.state.confirmations.pop(level, None)
        if previous is not None:
            previous.cancel()

        battery_path = self.state.devices.battery_path
        pending = Confirmation(level)
        callback = partial(self.confirm, pending, battery_path, command)
        pending.handle = self.scheduler.call_later(delay, callback)
        self.state.confirmations[level] = pending
        result.scheduled.append(level)

    def confirm(
        self, pending: Confirmation, battery_path: str, command: str
    ) -> SpawnRequest | None:
        """
        Re-check the battery after the delay and request the level command.

        The request is dropped if the confirmation was cancelled or replaced
        (a timer callback may already be waiting on the lock when that
        happens), or if the battery is known to have left the discharging
        statuses meanwhile. A failed status read does not prevent the
        request.
        """
        level = pending.level
        with self._lock:
            if self.state.confirmations.get(level) is not pending:
                logger.info("Ignoring cancelled %s battery level command", level.value)
                return None
            del self.state.confirmations[level]

            status = read_battery_status(self.source, battery_path)
            if status is not None and status not in DISCHARGING_FAMILY:
                logger.warning(
                    "Skipping %s battery level command, no longer discharging", level.value
                )
                return None
            request = SpawnRequest(level=level, command=command)

        if self.sink is not None:
            self.sink.spawn(request)
        return request
