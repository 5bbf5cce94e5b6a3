"""
One-shot battery status for conky and other scripts.

Reads /sys/class/power_supply once and prints "> 57%", with " CHG" while
charging or " FULL" when charged, followed by a time line when the driver
reports a rate. Without a battery it prints "> AC", with the battery
removed "> N/A", and "> ERR" when the charge cannot be read.
"""

import sys

from . import messages
from .filter import RateFilters
from .models import DISCHARGING_FAMILY, BatteryStatus
from .reading import BatteryReader
from .sysfs import SysfsSource, discover, read_battery_present, read_battery_status


def status_lines(source, battery_suffix=None) -> list[str]:
    """One-shot status; time is only known when the driver reports a rate."""
    devices = discover(source, battery_suffix)
    if devices.battery_path is None:
        return ["> AC"]

    if not read_battery_present(source, devices.battery_path):
        return ["> N/A"]

    status = read_battery_status(source, devices.battery_path)
    reader = BatteryReader(source, devices.battery_path, RateFilters())
    charge = reader.charge(discharging=status in DISCHARGING_FAMILY)
    if charge is None:
        return ["> ERR"]

    suffix = ""
    if status == BatteryStatus.CHARGING:
        suffix = " CHG"
    elif status == BatteryStatus.CHARGED:
        suffix = " FULL"

    lines = [f"> {charge.percentage}%{suffix}"]
    time_str = messages.time_text(charge.minutes)
    if time_str:
        lines.append(f"${{color4}}  {time_str}")
    return lines


def main(argv=None):
    """Print the status lines; an optional argument selects the battery by path suffix."""
    args = sys.argv[1:] if argv is None else argv
    suffix = args[0] if args else None
    for line in status_lines(SysfsSource(), suffix):
        print(line)


if __name__ == "__main__":
    main()
