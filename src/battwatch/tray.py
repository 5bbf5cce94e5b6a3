#!/usr/bin/env python3
"""
Battery tray indicator.
Drives the status engine from the GLib main loop; level command
confirmations are GLib timeouts, so the icon keeps updating meanwhile.
"""

import logging

import gi

gi.require_version("Gtk", "3.0")
gi.require_version("AyatanaAppIndicator3", "0.1")
from gi.repository import AyatanaAppIndicator3, GLib, Gtk

from . import messages
from .actions import DesktopSink, Notifier
from .engine import StatusEngine
from .sysfs import SysfsSource, discover

logger = logging.getLogger(__name__)

# icon each type must provide to be usable
ICON_TYPE_PROBES = {
    "standard": "battery-full",
    "notification": "notification-battery-100",
    "symbolic": "battery-full-symbolic",
}


def available_icon_types() -> dict:
    theme = Gtk.IconTheme.get_default()
    return {name: theme.has_icon(icon) for name, icon in ICON_TYPE_PROBES.items()}


def pick_icon_type(requested: str | None) -> str:
    available = available_icon_types()
    if requested is not None:
        if available.get(requested):
            return requested
        logger.warning("Icon type %s is unavailable", requested)
    for name in messages.ICON_TYPES:
        if available[name]:
            return name
    logger.error("No icon type found!")
    return "standard"


class GLibTimeout:
    """One-shot GLib timeout that can be cancelled before it fires."""

    def __init__(self, delay: float, callback):
        self.callback = callback
        self.source_id = GLib.timeout_add_seconds(int(delay), self._fire)

    def _fire(self) -> bool:
        self.source_id = None
        try:
            self.callback()
        except Exception:
            logger.exception("Delayed command check failed")
        return False

    def cancel(self):
        if self.source_id is not None:
            GLib.source_remove(self.source_id)
            self.source_id = None


class GLibScheduler:
    def call_later(self, delay: float, callback) -> GLibTimeout:
        return GLibTimeout(delay, callback)


class BatteryIndicator:
    """System tray indicator showing battery status."""

    def __init__(self, settings, source=None, battery_suffix: str | None = None):
        self.settings = settings
        self.source = source or SysfsSource()
        self.battery_suffix = battery_suffix
        self.icon_type = pick_icon_type(settings.icon_type)

        self.indicator = AyatanaAppIndicator3.Indicator.new(
            "battwatch", "battery-missing", AyatanaAppIndicator3.IndicatorCategory.HARDWARE
        )
        self.indicator.set_status(AyatanaAppIndicator3.IndicatorStatus.ACTIVE)
        self.indicator.set_title("battwatch")

        self.sink = DesktopSink(
            Notifier(hidden=settings.hide_notification), presenter=self.present
        )
        self.engine = StatusEngine(settings, self.source, GLibScheduler(), self.sink)

        self._build_menu()

        GLib.timeout_add_seconds(settings.update_interval, self.update)
        self.update()

    def _build_menu(self):
        """Build the indicator menu."""
        self.menu = Gtk.Menu()

        self.status_item = Gtk.MenuItem(label="Battery: --")
        self.status_item.set_sensitive(False)
        self.menu.append(self.status_item)

        self.time_item = Gtk.MenuItem(label="Time: --")
        self.time_item.set_sensitive(False)
        self.menu.append(self.time_item)

        self.menu.append(Gtk.SeparatorMenuItem())

        self.path_item = Gtk.MenuItem(label="Battery path: --")
        self.path_item.set_sensitive(False)
        self.menu.append(self.path_item)

        if self.settings.command_left_click:
            self.menu.append(Gtk.SeparatorMenuItem())
            command_item = Gtk.MenuItem(label="Run command")
            command_item.connect("activate", self.on_click)
            self.menu.append(command_item)
            self.indicator.set_secondary_activate_target(command_item)

        self.menu.append(Gtk.SeparatorMenuItem())

        quit_item = Gtk.MenuItem(label="Quit")
        quit_item.connect("activate", self.quit)
        self.menu.append(quit_item)

        self.menu.show_all()
        self.indicator.set_menu(self.menu)

    def present(self, update):
        summary = messages.update_text(update)
        time_str = messages.time_text(update.minutes)
        icon = messages.icon_name(update.status, update.percentage, self.icon_type)

        self.indicator.set_icon_full(icon, summary)
        self.indicator.set_title(messages.tooltip_text(summary, time_str))
        if update.ac_only:
            self.indicator.set_label("AC", "")
        else:
            self.indicator.set_label(f"{update.percentage}%", "")

        self.status_item.set_label(summary)
        self.time_item.set_label(f"Time: {time_str}" if time_str else "Time: --")

        devices = self.engine.state.devices
        if devices is not None and devices.battery_path:
            self.path_item.set_label(f"Battery path: {devices.battery_path}")
        else:
            self.path_item.set_label("Battery path: --")

    def update(self) -> bool:
        """Update the indicator with current battery status."""
        try:
            self.engine.tick(discover(self.source, self.battery_suffix))
        except Exception:
            logger.exception("Update error")
            self.indicator.set_label("ERR", "")
        return True

    def on_click(self, widget):
        self.sink.run(self.settings.command_left_click, "left click")

    def quit(self, widget):
        """Clean up and quit."""
        self.engine.state.cancel_confirmations()
        Gtk.main_quit()


def main(settings, battery_suffix=None):
    """Run the tray indicator until quit."""
    BatteryIndicator(settings, battery_suffix=battery_suffix)
    Gtk.main()
