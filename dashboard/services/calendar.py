"""
Calendar view of the time entry log.

A calendar covers a day, week, month, year or 90-day trend around an
anchor date (or an explicit date range) and reports every local day in it,
statistics over the whole range and the user's streaks.
"""
from time_entries.exceptions import ValidationError
from .aggregates import (
    WINDOW_CUSTOM,
    WINDOW_DAY,
    WINDOW_MONTH,
    WINDOW_TREND,
    WINDOW_WEEK,
    WINDOW_YEAR,
    AggregateCalculator,
    round_half_up,
)

CALENDAR_VIEWS = (WINDOW_DAY, WINDOW_WEEK, WINDOW_MONTH, WINDOW_YEAR, WINDOW_TREND)
WEEKDAY_NAMES = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
BEST_DAYS = 5


def range_statistics(days):
    """Totals, averages, best days and weekday pattern over a list of DayStat."""
    active = [d for d in days if d.has_data]
    total_minutes = sum(d.duration for d in days) // 60
    total_sessions = sum(d.session_count for d in days)

    categories = {}
    for day in days:
        for stat in day.categories:
            merged = categories.setdefault(stat.category_id, {
                'category_id': stat.category_id,
                'name': stat.name,
                'color': stat.color,
                'minutes': 0,
                'sessions': 0,
            })
            merged['minutes'] += stat.duration // 60
            merged['sessions'] += stat.count

    best_days = sorted(active, key=lambda d: (-d.duration, d.day))[:BEST_DAYS]

    weekly_pattern = []
    for index, name in enumerate(WEEKDAY_NAMES):
        same_weekday = [d for d in days if d.day.weekday() == index]
        average = (
            round_half_up(sum(d.total_minutes for d in same_weekday) / len(same_weekday))
            if same_weekday else 0
        )
        weekly_pattern.append({'day_name': name, 'avg_minutes': average, 'day_count': len(same_weekday)})

    return {
        'total_minutes': total_minutes,
        'total_hours': total_minutes // 60,
        'total_sessions': total_sessions,
        'active_days': len(active),
        'total_days': len(days),
        'avg_daily_minutes': round_half_up(total_minutes / len(active)) if active else 0,
        'avg_session_minutes': round_half_up(total_minutes / total_sessions) if total_sessions else 0,
        'category_stats': sorted(categories.values(), key=lambda c: (-c['minutes'], c['name'])),
        'best_days': [
            {'date': d.day.isoformat(), 'total_minutes': d.total_minutes, 'total_sessions': d.session_count}
            for d in best_days
        ],
        'weekly_pattern': weekly_pattern,
        'completion_rate': round_half_up(len(active) / len(days) * 100) if days else 0,
    }


def build_calendar(user, view=WINDOW_MONTH, anchor=None, start=None, end=None, tz=None, now=None):
    """
    Calendar payload for user. An explicit start/end date range wins over
    view and anchor.
    """
    calculator = AggregateCalculator(user, tz=tz, now=now)
    if start is not None or end is not None:
        window = calculator.window(WINDOW_CUSTOM, start, end)
    elif view in CALENDAR_VIEWS:
        window = calculator.window(view, anchor=anchor)
    else:
        raise ValidationError(f"unknown calendar view '{view}'")

    days = calculator.daily_breakdown(window)
    current = calculator.streak()
    statistics = range_statistics(days)

    return {
        'view': window.kind,
        'window': window.as_dict(),
        'days': [d.as_dict() for d in days],
        'statistics': statistics,
        'streak': {
            'current': current,
            'longest': calculator.longest_streak(),
            'is_active': current > 0,
        },
        'total_days': statistics['total_days'],
        'active_days': statistics['active_days'],
    }
