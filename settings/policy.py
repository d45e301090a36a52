"""
Timer policy resolution.

Each value is looked up in the Setting table first, then in Django settings,
then falls back to the built-in default.
"""
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings as django_settings

from .models import Setting

STALE_THRESHOLD_KEY = 'timer_stale_threshold_hours'
STALE_CAP_KEY = 'timer_stale_duration_cap_seconds'
STREAK_LOOKBACK_KEY = 'streak_lookback_days'

DEFAULT_STALE_THRESHOLD_HOURS = 24
DEFAULT_STALE_DURATION_CAP_SECONDS = 8 * 60 * 60
DEFAULT_STREAK_LOOKBACK_DAYS = 365


@dataclass(frozen=True)
class TimerPolicy:
    stale_threshold_hours: float = DEFAULT_STALE_THRESHOLD_HOURS
    stale_duration_cap_seconds: int = DEFAULT_STALE_DURATION_CAP_SECONDS
    streak_lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS

    @property
    def stale_threshold(self):
        return timedelta(hours=self.stale_threshold_hours)


def get_timer_policy():
    """Build the TimerPolicy currently in effect."""
    threshold = Setting.get_number(
        STALE_THRESHOLD_KEY,
        getattr(django_settings, 'TIMER_STALE_THRESHOLD_HOURS', DEFAULT_STALE_THRESHOLD_HOURS),
        cast=float,
    )
    cap = Setting.get_number(
        STALE_CAP_KEY,
        getattr(django_settings, 'TIMER_STALE_DURATION_CAP_SECONDS', DEFAULT_STALE_DURATION_CAP_SECONDS),
        cast=int,
    )
    lookback = Setting.get_number(
        STREAK_LOOKBACK_KEY,
        getattr(django_settings, 'STREAK_LOOKBACK_DAYS', DEFAULT_STREAK_LOOKBACK_DAYS),
        cast=int,
    )

    # Non-positive values would close every timer or credit nothing.
    if threshold <= 0:
        threshold = DEFAULT_STALE_THRESHOLD_HOURS
    if cap < 0:
        cap = DEFAULT_STALE_DURATION_CAP_SECONDS
    if lookback <= 0:
        lookback = DEFAULT_STREAK_LOOKBACK_DAYS

    return TimerPolicy(
        stale_threshold_hours=threshold,
        stale_duration_cap_seconds=cap,
        streak_lookback_days=lookback,
    )
