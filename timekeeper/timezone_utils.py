from datetime import datetime, timedelta

import pytz
from django.utils import timezone


def get_user_timezone(request):
    """
    Get the user's timezone from the cookie set by JavaScript.
    Falls back to UTC if no timezone is set.
    """
    user_tz_name = request.COOKIES.get('user_timezone', 'UTC')
    return resolve_timezone(user_tz_name)


def resolve_timezone(tz_name):
    """Return a pytz timezone for tz_name, or UTC if the name is unknown."""
    if not tz_name:
        return pytz.UTC
    try:
        return pytz.timezone(tz_name)
    except pytz.exceptions.UnknownTimeZoneError:
        return pytz.UTC


def local_today(user_tz, now=None):
    """Today's date in user_tz."""
    now = now or timezone.now()
    return now.astimezone(user_tz).date()


def day_bounds(day, user_tz):
    """
    Timezone-aware [start, end) datetimes for a calendar date in user_tz.

    The end is the next local midnight, so DST days are 23 or 25 hours long.
    """
    start = user_tz.localize(datetime.combine(day, datetime.min.time()))
    end = user_tz.localize(datetime.combine(day + timedelta(days=1), datetime.min.time()))
    return start, end


def get_user_today(request):
    """
    Get today's date in the user's timezone.
    Returns both the date object and timezone-aware start/end datetimes.
    """
    user_tz = get_user_timezone(request)
    today = local_today(user_tz)
    today_start, today_end = day_bounds(today, user_tz)
    return today, today_start, today_end
