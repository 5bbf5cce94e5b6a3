"""
Power supply attribute access through /sys/class/power_supply.
Every failure (missing file, permission, garbage content) reads as None.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .models import BatteryStatus, DeviceSet

logger = logging.getLogger(__name__)

SYSFS_PATH = "/sys/class/power_supply"

# Values below this are noise or an error marker, not a reading
MIN_NUMBER = 0.01

STATUS_PREFIXES = [
    ("Charging", BatteryStatus.CHARGING),
    ("Discharging", BatteryStatus.DISCHARGING),
    ("Not charging", BatteryStatus.NOT_CHARGING),
    ("Full", BatteryStatus.CHARGED),
]


class SysfsSource:
    """Reads raw key/value attribute files of power supply devices."""

    def __init__(self, root: str = SYSFS_PATH):
        self.root = Path(root)

    def read_string(self, path: str, attribute: str) -> str | None:
        try:
            return (Path(path) / attribute).read_text().strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("cannot read %s/%s: %s", path, attribute, e)
            return None

    def read_number(self, path: str, attribute: str) -> float | None:
        raw = self.read_string(path, attribute)
        if raw is None:
            return None
        try:
            value = float(raw)
        except ValueError:
            logger.debug("non-numeric value in %s/%s: %r", path, attribute, raw)
            return None
        if abs(value) < MIN_NUMBER:
            return None
        return value

    def entries(self) -> list[str]:
        """Device directories under the root, sorted by name."""
        try:
            return sorted(str(p) for p in self.root.iterdir())
        except OSError as e:
            logger.error("Cannot open sysfs directory: %s (%s)", self.root, e)
            return []


def _read_flag(source, path, attribute) -> bool | None:
    if path is None:
        return None
    value = source.read_string(path, attribute)
    if value is None:
        return None
    logger.debug("%s %s: %s", path, attribute, value)
    return value.startswith("1")


def read_ac_online(source, path: str | None) -> bool | None:
    return _read_flag(source, path, "online")


def read_battery_present(source, path: str | None) -> bool | None:
    return _read_flag(source, path, "present")


def read_battery_status(source, path: str | None) -> BatteryStatus | None:
    """Parse the raw status attribute; unrecognised text is UNKNOWN."""
    if path is None:
        return None
    value = source.read_string(path, "status")
    if value is None:
        return None

    status = BatteryStatus.UNKNOWN
    for prefix, candidate in STATUS_PREFIXES:
        if value.startswith(prefix):
            status = candidate
            break

    logger.debug("battery status: %s (%s)", status.value, value)
    return status


@dataclass(frozen=True)
class PowerSupply:
    kind: str  # "Battery" or "AC"
    id: str
    path: str


def list_power_supplies(source) -> list[PowerSupply]:
    """All usable batteries and AC adapters, in directory order."""
    supplies = []
    for path in source.entries():
        kind = source.read_string(path, "type")
        if kind is None:
            continue
        if kind.startswith("Battery") and read_battery_present(source, path) is not None:
            supplies.append(PowerSupply("Battery", Path(path).name, path))
        elif kind.startswith("Mains") and read_ac_online(source, path) is not None:
            supplies.append(PowerSupply("AC", Path(path).name, path))
    return supplies


def discover(source, battery_suffix: str | None = None) -> DeviceSet:
    """
    Pick the battery and AC adapter to monitor.

    Args:
        source: Attribute source with an entries() listing.
        battery_suffix: Only accept a battery whose path ends with this.

    Returns:
        DeviceSet with either path possibly None.
    """
    battery_path = None
    ac_path = None

    for supply in list_power_supplies(source):
        if supply.kind == "Battery" and battery_path is None:
            if battery_suffix is None or supply.path.endswith(battery_suffix):
                battery_path = supply.path
                logger.debug("battery path: %s", battery_path)
        elif supply.kind == "AC" and ac_path is None:
            ac_path = supply.path
            logger.debug("ac path: %s", ac_path)

    if battery_path is None:
        if battery_suffix is not None:
            logger.error("No battery with suffix %s found!", battery_suffix)
        elif ac_path is None:
            logger.error("No battery nor AC power supply found!")

    return DeviceSet(battery_path=battery_path, ac_path=ac_path)
