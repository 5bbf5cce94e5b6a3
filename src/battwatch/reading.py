"""
Battery charge computation from raw capacity and rate attributes.

Each quantity is resolved by trying an ordered list of attribute strategies
until one yields a value. Unit choice (energy vs. charge) is returned
explicitly so the rate lookup uses the matching attributes and filters.
"""

import logging
import math
from dataclasses import dataclass

from .filter import RateFilters

logger = logging.getLogger(__name__)

# (attribute, uses_charge) in order of preference
FULL_CAPACITY_ATTRIBUTES = [("energy_full", False), ("charge_full", True)]

MIN_RATE = 0.01


@dataclass(frozen=True)
class FullCapacity:
    uses_charge: bool
    capacity: float


@dataclass(frozen=True)
class BatteryCharge:
    """
    Computed charge of a battery.

    Attributes:
        percentage: 0-100, floored.
        minutes: Minutes to empty (discharging) or to full (charging),
            None when no rate source is available yet.
        uses_charge: True when charge_* (µAh) attributes were used
            instead of energy_* (µWh).
    """

    percentage: int
    minutes: int | None
    uses_charge: bool


class BatteryReader:
    """
    Turns raw attributes of one battery into percentage and time estimates.

    The energy/charge filters are fed only by remaining_capacity(), the
    power/current filters only by current_rate().
    """

    def __init__(self, source, battery_path: str, filters: RateFilters):
        self.source = source
        self.path = battery_path
        self.filters = filters

    def full_capacity(self) -> FullCapacity | None:
        for attribute, uses_charge in FULL_CAPACITY_ATTRIBUTES:
            value = self.source.read_number(self.path, attribute)
            if value is not None:
                return FullCapacity(uses_charge, value)
        logger.debug("full capacity: unavailable")
        return None

    def remaining_capacity(self, full: FullCapacity) -> float | None:
        """Absolute remaining capacity, in the unit of the full capacity."""
        strategies = [
            lambda: self._remaining_absolute(full.uses_charge),
            lambda: self._remaining_from_percent(full.capacity),
        ]
        for strategy in strategies:
            value = strategy()
            if value is not None:
                return value
        logger.debug("remaining capacity: unavailable")
        return None

    def _remaining_absolute(self, uses_charge):
        attribute = "charge_now" if uses_charge else "energy_now"
        value = self.source.read_number(self.path, attribute)
        if value is not None:
            self.filters.capacity_filter(uses_charge).append(value)
        return value

    def _remaining_from_percent(self, full_capacity):
        pct = self.source.read_number(self.path, "capacity")
        if pct is None:
            return None
        return pct * full_capacity / 100.0

    def percentage(self) -> int | None:
        full = self.full_capacity()
        if full is None:
            return None
        remaining = self.remaining_capacity(full)
        if remaining is None:
            return None
        return _percentage(remaining, full.capacity)

    def current_rate(self, uses_charge: bool) -> float | None:
        """
        Charge/discharge rate per hour in the unit family of uses_charge.

        Prefers the averaged instrument reading; falls back to the slope of
        the capacity history, which needs a minute of samples first.
        """
        for strategy in (self._instrument_rate, self._derived_rate):
            rate = strategy(uses_charge)
            if rate is not None and rate >= MIN_RATE:
                return rate
        logger.debug("current rate: unavailable")
        return None

    def _instrument_rate(self, uses_charge):
        attribute = "current_now" if uses_charge else "power_now"
        value = self.source.read_number(self.path, attribute)
        if value is None:
            return None
        f = self.filters.rate_filter(uses_charge)
        # some drivers report a negative value while discharging
        f.append(abs(value))
        rate = f.mean()
        logger.debug("%s = %g, average = %g", attribute, value, rate)
        return rate

    def _derived_rate(self, uses_charge):
        f = self.filters.capacity_filter(uses_charge)
        rate = f.rate()
        if rate is None:
            return None
        logger.debug("estimated %s rate from %d samples: %g", f.name, len(f), rate)
        return abs(rate)

    def charge(self, discharging: bool, with_time: bool = True) -> BatteryCharge | None:
        """
        Percentage plus time remaining.

        Args:
            discharging: Estimate time to empty when True, else time to full.
            with_time: Skip the rate lookup entirely when False.

        Returns:
            BatteryCharge, or None when the percentage cannot be computed.
        """
        full = self.full_capacity()
        if full is None:
            return None
        remaining = self.remaining_capacity(full)
        if remaining is None:
            return None

        percentage = _percentage(remaining, full.capacity)
        if not with_time:
            return BatteryCharge(percentage, None, full.uses_charge)

        rate = self.current_rate(full.uses_charge)
        if rate is None:
            return BatteryCharge(percentage, None, full.uses_charge)

        if discharging:
            minutes = remaining / rate * 60.0
        else:
            minutes = max(full.capacity - remaining, 0.0) / rate * 60.0

        return BatteryCharge(percentage, int(minutes), full.uses_charge)


def _percentage(remaining: float, full: float) -> int:
    pct = math.floor(min(remaining / full * 100.0, 100.0))
    return max(0, int(pct))
