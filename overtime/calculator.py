from __future__ import annotations

from datetime import time
from typing import Optional, Union

from .models import LUNCH_BREAK_HOURS, OvertimeCalculation, round_half_up

DEFAULT_HOURLY_RATE = 15.57
MINUTES_PER_DAY = 24 * 60

ClockValue = Union[str, time, None]


def minutes_since_midnight(value: ClockValue) -> Optional[int]:
    """Return ``hour * 60 + minute`` for an ``HH:MM`` string or a ``time``.

    Seconds are ignored. Empty or unparsable values give ``None``.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    text = value.strip()
    if not text:
        return None
    parts = text.split(":")
    if len(parts) < 2:
        return None
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    return hour * 60 + minute


def elapsed_minutes(start_minutes: int, end_minutes: int) -> int:
    delta = end_minutes - start_minutes
    if delta < 0:
        delta += MINUTES_PER_DAY  # crosses midnight
    return delta


def default_lunch_discount(total_hours: float, threshold_hours: float = 6.0) -> bool:
    return total_hours >= threshold_hours


def calculate(
    start_time: ClockValue,
    end_time: ClockValue,
    lunch_discount: bool,
    hourly_rate: float = DEFAULT_HOURLY_RATE,
) -> Optional[OvertimeCalculation]:
    """Derive hours and value for a shift.

    Returns ``None`` while either end of the shift is missing. Zero or negative
    results are returned as-is; rejecting them is the validator's job.
    """
    start_minutes = minutes_since_midnight(start_time)
    end_minutes = minutes_since_midnight(end_time)
    if start_minutes is None or end_minutes is None:
        return None

    total_hours = elapsed_minutes(start_minutes, end_minutes) / 60
    net_hours = total_hours - LUNCH_BREAK_HOURS if lunch_discount else total_hours
    total_value = net_hours * hourly_rate

    return OvertimeCalculation(
        total_hours=round_half_up(total_hours),
        net_hours=round_half_up(net_hours),
        total_value=round_half_up(total_value),
        lunch_discount=bool(lunch_discount),
        hourly_rate=hourly_rate,
    )


class OvertimeCalculator:
    """Calculator bound to the rate in force when a record is submitted."""

    def __init__(self, hourly_rate: float = DEFAULT_HOURLY_RATE, auto_lunch_threshold: float = 6.0) -> None:
        self.hourly_rate = hourly_rate
        self.auto_lunch_threshold = auto_lunch_threshold

    def calculate(
        self, start_time: ClockValue, end_time: ClockValue, lunch_discount: Optional[bool] = None
    ) -> Optional[OvertimeCalculation]:
        if lunch_discount is None:
            start_minutes = minutes_since_midnight(start_time)
            end_minutes = minutes_since_midnight(end_time)
            if start_minutes is None or end_minutes is None:
                return None
            hours = elapsed_minutes(start_minutes, end_minutes) / 60
            lunch_discount = default_lunch_discount(hours, self.auto_lunch_threshold)
        return calculate(start_time, end_time, lunch_discount, self.hourly_rate)
