"""
Duration and points accounting for time entries.

Durations are whole seconds, never negative. One point is awarded per
completed minute.
"""
import math
from dataclasses import dataclass
from typing import Optional
from datetime import datetime

from django.utils import timezone

from time_entries.exceptions import ValidationError

SECONDS_PER_POINT = 60


@dataclass(frozen=True)
class Accounting:
    duration: int
    points: int


def calculate_duration(start: datetime, end: Optional[datetime] = None) -> int:
    """
    Seconds elapsed between start and end (now when end is None),
    floored to a whole second and clamped at zero.
    """
    if start is None:
        raise ValidationError("start time is required")
    if end is None:
        end = timezone.now()
    seconds = (end - start).total_seconds()
    return max(0, math.floor(seconds))


def calculate_points(duration: int) -> int:
    """One point per completed minute."""
    if duration is None or duration < 0:
        raise ValidationError(f"duration must be a non-negative number of seconds, got {duration!r}")
    return int(duration) // SECONDS_PER_POINT


def calculate(start: datetime, end: Optional[datetime] = None, cap: Optional[int] = None) -> Accounting:
    """
    Duration and points for an interval, with duration optionally capped.
    """
    if cap is not None and cap < 0:
        raise ValidationError(f"duration cap must be non-negative, got {cap!r}")
    duration = calculate_duration(start, end)
    if cap is not None:
        duration = min(duration, cap)
    return Accounting(duration=duration, points=calculate_points(duration))
