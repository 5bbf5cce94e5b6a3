"""Tests for user-facing strings and icon names."""

import pytest

from battwatch import messages
from battwatch.models import BatteryStatus, Level, PresentationUpdate


@pytest.mark.parametrize(
    "minutes, text",
    [
        (None, None),
        (-1, None),
        (0, "0 minutes remaining"),
        (1, "1 minute remaining"),
        (59, "59 minutes remaining"),
        (60, "1 hour, 0 minutes remaining"),
        (61, "1 hour, 1 minute remaining"),
        (135, "2 hours, 15 minutes remaining"),
    ],
)
def test_time_text(minutes, text):
    assert messages.time_text(minutes) == text


def test_battery_text():
    assert messages.battery_text(BatteryStatus.CHARGING, 42) == "Battery is charging (42%)"
    assert messages.battery_text(Level.CRITICAL, 3) == "Battery level is critical! (3% remaining)"
    assert messages.battery_text(BatteryStatus.MISSING) == "Battery is missing!"


def test_update_text_prefers_level():
    update = PresentationUpdate(status=BatteryStatus.DISCHARGING, percentage=15, level=Level.LOW)
    assert messages.update_text(update) == "Battery level is low! (15% remaining)"
    assert messages.update_text(PresentationUpdate(status=None)) == messages.AC_ONLY_TEXT


def test_tooltip_text():
    assert messages.tooltip_text("a", None) == "a"
    assert messages.tooltip_text("a", "b") == "a\nb"


@pytest.mark.parametrize(
    "status, percentage, icon_type, name",
    [
        (None, 0, "standard", "ac-adapter"),
        (BatteryStatus.MISSING, 0, "standard", "battery-missing"),
        (BatteryStatus.UNKNOWN, 0, "notification", "notification-battery-empty"),
        (BatteryStatus.DISCHARGING, 20, "standard", "battery-caution"),
        (BatteryStatus.DISCHARGING, 35, "standard", "battery-low"),
        (BatteryStatus.CHARGING, 70, "standard", "battery-good-charging"),
        (BatteryStatus.CHARGED, 100, "standard", "battery-full-charged"),
        (BatteryStatus.CHARGING, 55, "notification", "notification-battery-060-plugged"),
        (BatteryStatus.NOT_CHARGING, 95, "notification", "notification-battery-100"),
        (BatteryStatus.DISCHARGING, 90, "symbolic", "battery-full-symbolic"),
    ],
)
def test_icon_name(status, percentage, icon_type, name):
    assert messages.icon_name(status, percentage, icon_type) == name
