"""
User-facing strings and icon names for battery states.
"""

from .models import BatteryStatus, Level

ICON_TYPES = ("standard", "notification", "symbolic")

AC_ONLY_TEXT = "AC only, no battery!"


def battery_text(state, percentage: int = 0) -> str:
    """Summary line for a BatteryStatus or a threshold Level."""
    texts = {
        BatteryStatus.MISSING: "Battery is missing!",
        BatteryStatus.UNKNOWN: "Battery status is unknown!",
        BatteryStatus.CHARGED: "Battery is charged!",
        BatteryStatus.CHARGING: f"Battery is charging ({percentage}%)",
        BatteryStatus.DISCHARGING: f"Battery is discharging ({percentage}% remaining)",
        BatteryStatus.NOT_CHARGING: f"Battery is not charging ({percentage}% remaining)",
        Level.LOW: f"Battery level is low! ({percentage}% remaining)",
        Level.CRITICAL: f"Battery level is critical! ({percentage}% remaining)",
    }
    return texts.get(state, "")


def _plural(n, singular, plural):
    return singular if n == 1 else plural


def time_text(minutes: int | None) -> str | None:
    if minutes is None or minutes < 0:
        return None

    hours, minutes = divmod(minutes, 60)
    if hours > 0:
        mins = f"{minutes} {_plural(minutes, 'minute', 'minutes')}"
        return f"{hours} {_plural(hours, 'hour', 'hours')}, {mins} remaining"
    return f"{minutes} {_plural(minutes, 'minute remaining', 'minutes remaining')}"


def tooltip_text(summary: str, time_str: str | None) -> str:
    if time_str:
        return f"{summary}\n{time_str}"
    return summary


def update_text(update) -> str:
    """Summary line for a PresentationUpdate."""
    if update.ac_only:
        return AC_ONLY_TEXT
    return battery_text(update.level or update.status, update.percentage)


def icon_name(status: BatteryStatus | None, percentage: int, icon_type: str = "standard") -> str:
    """Freedesktop icon name for the given state."""
    if status is None:
        return "ac-adapter"

    notification = icon_type == "notification"
    name = "notification-battery" if notification else "battery"

    if status in (BatteryStatus.MISSING, BatteryStatus.UNKNOWN):
        name += "-empty" if notification else "-missing"
    elif notification:
        for limit, suffix in ((20, "-020"), (40, "-040"), (60, "-060"), (80, "-080")):
            if percentage <= limit:
                name += suffix
                break
        else:
            name += "-100"
        if status in (BatteryStatus.CHARGING, BatteryStatus.CHARGED):
            name += "-plugged"
    else:
        if percentage <= 20:
            name += "-caution"
        elif percentage <= 40:
            name += "-low"
        elif percentage <= 80:
            name += "-good"
        else:
            name += "-full"
        if status == BatteryStatus.CHARGING:
            name += "-charging"
        elif status == BatteryStatus.CHARGED:
            name += "-charged"

    if icon_type == "symbolic":
        name += "-symbolic"
    return name
