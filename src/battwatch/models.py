"""
Value types exchanged between the status engine and its collaborators.

The engine never renders or executes anything itself; it emits these
models and a sink decides how to present or act on them.
"""

from enum import Enum

from pydantic import BaseModel


class BatteryStatus(str, Enum):
    """Battery status; low and critical are flags layered on top, not statuses."""

    MISSING = "missing"
    UNKNOWN = "unknown"
    CHARGED = "charged"
    CHARGING = "charging"
    DISCHARGING = "discharging"
    NOT_CHARGING = "not-charging"


DISCHARGING_FAMILY = frozenset({BatteryStatus.DISCHARGING, BatteryStatus.NOT_CHARGING})


class Level(str, Enum):
    """Threshold levels layered on top of the discharging statuses."""

    LOW = "low"
    CRITICAL = "critical"


class Category(str, Enum):
    """Kind of notification the status engine emits."""

    AC_ONLY = "ac-only"
    STATUS_CHANGE = "status-change"
    LOW = "low"
    CRITICAL = "critical"
    SPAWN_FAILED = "spawn-failed"


class DeviceSet(BaseModel):
    """Battery and AC power supply paths detected for one tick."""

    battery_path: str | None = None
    ac_path: str | None = None

    model_config = {"frozen": True}


class PresentationUpdate(BaseModel):
    """
    What the presentation layer should show.

    Attributes:
        status: Battery status, or None when running on AC without a battery.
        percentage: Charge level 0-100.
        minutes: Time to empty/full, None when no estimate is available.
        level: LOW or CRITICAL once the matching threshold has been crossed.
    """

    status: BatteryStatus | None
    percentage: int = 0
    minutes: int | None = None
    level: Level | None = None

    model_config = {"frozen": True}

    @property
    def ac_only(self) -> bool:
        return self.status is None


class NotificationEvent(BaseModel):
    """A desktop notification; sticky ones never expire on their own."""

    category: Category
    summary: str
    body: str | None = None
    critical: bool = False
    sticky: bool = False

    model_config = {"frozen": True}


class SpawnRequest(BaseModel):
    """A confirmed request to run the command configured for a level."""

    level: Level
    command: str

    model_config = {"frozen": True}
