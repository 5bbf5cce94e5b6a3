"""
Shared fixtures: an in-memory power supply tree, a controllable clock and a
scheduler whose timers fire only when a test says so.
"""

import pytest

from battwatch.filter import RateFilters
from battwatch.models import DeviceSet
from battwatch.sysfs import SysfsSource

BAT = "/sys/class/power_supply/BAT0"
AC = "/sys/class/power_supply/AC"

_BATTWATCH_ENV_VARS = (
    "BATTWATCH_UPDATE_INTERVAL",
    "BATTWATCH_LOW_LEVEL",
    "BATTWATCH_CRITICAL_LEVEL",
    "BATTWATCH_COMMAND_LOW_LEVEL",
    "BATTWATCH_COMMAND_CRITICAL_LEVEL",
    "BATTWATCH_COMMAND_LEFT_CLICK",
    "BATTWATCH_ICON_TYPE",
    "BATTWATCH_HIDE_NOTIFICATION",
    "BATTWATCH_DEBUG",
)


class FakeSource(SysfsSource):
    """SysfsSource reading from a dict of {path: {attribute: text}}."""

    def __init__(self, tree=None):
        super().__init__(root="/sys/class/power_supply")
        self.tree = tree or {}

    def set(self, path, **attrs):
        self.tree.setdefault(path, {}).update({k: str(v) for k, v in attrs.items()})

    def drop(self, path, *attrs):
        for attr in attrs:
            self.tree.get(path, {}).pop(attr, None)

    def read_string(self, path, attribute):
        value = self.tree.get(path, {}).get(attribute)
        return None if value is None else value.strip()

    def entries(self):
        return sorted(self.tree)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class ManualTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        assert not self.cancelled, "cancelled timer fired"
        self.fired = True
        return self.callback()


class ManualScheduler:
    def __init__(self):
        self.timers = []

    def call_later(self, delay, callback):
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]


class RecordingSink:
    def __init__(self):
        self.updates = []
        self.notifications = []
        self.spawned = []

    def present(self, update):
        self.updates.append(update)

    def notify(self, event):
        self.notifications.append(event)

    def spawn(self, request):
        self.spawned.append(request)


@pytest.fixture(autouse=True)
def _clean_battwatch_env(monkeypatch, tmp_path):
    """Isolate settings from the environment and any .env file."""
    for var in _BATTWATCH_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def filters(clock):
    return RateFilters(clock=clock)


@pytest.fixture()
def source():
    """A discharging energy-reporting battery at 20% with AC offline."""
    src = FakeSource()
    src.set(BAT, type="Battery", present="1", status="Discharging",
            energy_full="50000", energy_now="10000", power_now="10000")
    src.set(AC, type="Mains", online="0")
    return src


@pytest.fixture()
def devices():
    return DeviceSet(battery_path=BAT, ac_path=AC)


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def sink():
    return RecordingSink()
