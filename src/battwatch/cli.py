"""
Command line entry point: battwatch [options] [BATTERY ID]
"""

import argparse
import logging
import logging.handlers
import os
import sys

from . import __version__
from .config import ConfigError, load_settings
from .sysfs import SysfsSource, list_power_supplies

logger = logging.getLogger(__name__)

SYSLOG_SOCKET = "/dev/log"


def configure_logging(debug: bool = False):
    """Log to stderr; warnings and above also go to syslog when available."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)

    if os.path.exists(SYSLOG_SOCKET):
        try:
            syslog = logging.handlers.SysLogHandler(address=SYSLOG_SOCKET)
        except OSError as e:
            logger.debug("syslog unavailable: %s", e)
        else:
            syslog.setLevel(logging.WARNING)
            syslog.setFormatter(logging.Formatter("battwatch: %(message)s"))
            root.addHandler(syslog)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="battwatch",
        description="A lightweight battery monitor that sits in your system tray",
    )
    p.add_argument("battery_id", nargs="?", help="monitor the battery whose path ends with this")
    p.add_argument("-v", "--version", action="store_true", help="Display the version")
    p.add_argument("-d", "--debug", action="store_true", default=None,
                   help="Display debug information")
    p.add_argument("-u", "--update-interval", type=int, help="Set update interval (in seconds)")
    p.add_argument("-i", "--icon-type",
                   help="Set icon type ('standard', 'notification' or 'symbolic')")
    p.add_argument("-l", "--low-level", type=int, help="Set low battery level (in percent)")
    p.add_argument("-r", "--critical-level", type=int,
                   help="Set critical battery level (in percent)")
    p.add_argument("-o", "--command-low-level",
                   help="Command to execute when low battery level is reached")
    p.add_argument("-c", "--command-critical-level",
                   help="Command to execute when critical battery level is reached")
    p.add_argument("-x", "--command-left-click",
                   help="Command to execute when clicking on tray icon")
    p.add_argument("-n", "--hide-notification", action="store_true", default=None,
                   help="Hide the notification popups")
    p.add_argument("-t", "--list-icon-types", action="store_true",
                   help="List available icon types")
    p.add_argument("-p", "--list-power-supplies", action="store_true",
                   help="List available power supplies (battery and AC)")
    p.add_argument("--headless", action="store_true",
                   help="Run without a tray icon (notifications and commands only)")
    return p


def cmd_list_power_supplies(source) -> int:
    print("List of available power supplies:")
    for supply in list_power_supplies(source):
        print(f"type: {supply.kind:<12.12}\tid: {supply.id:<12.12}\tpath: {supply.path}")
    return 0


def cmd_list_icon_types() -> int:
    from .tray import available_icon_types

    print("List of available icon types:")
    for name, available in available_icon_types().items():
        print(f"{name}\t{'available' if available else 'unavailable'}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        print("battwatch: a lightweight battery monitor that sits in your system tray")
        print(f"version {__version__}")
        return 0

    configure_logging(bool(args.debug))

    if args.list_power_supplies:
        return cmd_list_power_supplies(SysfsSource())

    if args.list_icon_types:
        return cmd_list_icon_types()

    try:
        settings = load_settings(
            update_interval=args.update_interval,
            low_level=args.low_level,
            critical_level=args.critical_level,
            command_low_level=args.command_low_level,
            command_critical_level=args.command_critical_level,
            command_left_click=args.command_left_click,
            icon_type=args.icon_type,
            hide_notification=args.hide_notification,
            debug=args.debug,
        )
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if settings.debug and not args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.headless:
        from .daemon import HeadlessMonitor

        HeadlessMonitor(settings, battery_suffix=args.battery_id).run()
        return 0

    from . import tray

    tray.main(settings, battery_suffix=args.battery_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
