"""
battwatch - Battery monitor for Linux power supplies.

This package provides:
- Smoothed rate and time remaining estimation from sysfs attributes
- Battery status state machine with low/critical hysteresis
- Delayed, re-verified low/critical level commands
- System tray indicator and headless daemon
"""

__version__ = "1.0.0"

from .engine import EngineState, StatusEngine, TickResult
from .filter import MAX_SAMPLES, RateFilter, RateFilters
from .models import (
    BatteryStatus,
    DeviceSet,
    Level,
    NotificationEvent,
    PresentationUpdate,
    SpawnRequest,
)
from .reading import BatteryCharge, BatteryReader

__all__ = [
    "EngineState",
    "StatusEngine",
    "TickResult",
    "MAX_SAMPLES",
    "RateFilter",
    "RateFilters",
    "BatteryStatus",
    "DeviceSet",
    "Level",
    "NotificationEvent",
    "PresentationUpdate",
    "SpawnRequest",
    "BatteryCharge",
    "BatteryReader",
]
