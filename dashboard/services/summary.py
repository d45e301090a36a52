from dataclasses import asdict

from achievements.models import UserAchievement
from .aggregates import WINDOW_ALL, WINDOW_DAY, WINDOW_MONTH, WINDOW_WEEK, AggregateCalculator

WINDOW_LABELS = {
    WINDOW_DAY: 'today',
    WINDOW_WEEK: 'week',
    WINDOW_MONTH: 'month',
}


def build_dashboard(user, tz=None, now=None):
    """
    Everything the dashboard shows: time totals and category splits for
    today, this week and this month, goal progress, and lifetime totals.
    """
    calculator = AggregateCalculator(user, tz=tz, now=now)
    windows = {label: calculator.window(kind) for kind, label in WINDOW_LABELS.items()}
    all_time = calculator.window(WINDOW_ALL)
    lifetime = calculator.totals(all_time)

    category_stats = {
        label: [asdict(c) for c in calculator.category_breakdown(window)]
        for label, window in windows.items()
    }
    category_stats['all_time'] = [asdict(c) for c in calculator.category_breakdown(all_time)]

    return {
        'time_stats': {label: calculator.totals(window).as_dict() for label, window in windows.items()},
        'category_stats': category_stats,
        'goal_progress': [asdict(g) for g in calculator.goal_progress()],
        'total_stats': {
            'total_minutes': lifetime.minutes,
            'total_hours': lifetime.hours,
            'total_sessions': lifetime.sessions,
            'total_points': lifetime.points,
            'total_badges': UserAchievement.objects.filter(user=user).count(),
            'current_streak': calculator.streak(),
        },
        'dates': {
            'today': calculator.today.isoformat(),
            'week_start': windows['week'].start.isoformat(),
            'month_start': windows['month'].start.isoformat(),
        },
    }
