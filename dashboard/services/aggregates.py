"""
Statistics derived from the time entry log.

Nothing here is stored: totals, category breakdowns, streaks and goal
progress are recomputed from completed time entries (end_time set and
duration > 0) on every call. Day boundaries are local midnights in the
user's timezone.
"""
import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from typing import FrozenSet, List, Optional

import pytz
from django.db.models import Count, Max, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from achievements.models import UserAchievement
from goals.models import Goal, GoalPeriod
from settings.policy import get_timer_policy
from timekeeper.timezone_utils import day_bounds, local_today
from time_entries.exceptions import ValidationError
from time_entries.models import TimeEntry

WINDOW_DAY = 'day'
WINDOW_WEEK = 'week'
WINDOW_MONTH = 'month'
WINDOW_YEAR = 'year'
WINDOW_TREND = 'trend'
WINDOW_CUSTOM = 'custom'
WINDOW_ALL = 'all'

TREND_DAYS = 90
MAX_BREAKDOWN_DAYS = 366
# Eight hours of tracked time is a full-intensity day
FULL_INTENSITY_MINUTES = 8 * 60

PERIOD_WINDOWS = {
    GoalPeriod.DAILY: WINDOW_DAY,
    GoalPeriod.WEEKLY: WINDOW_WEEK,
    GoalPeriod.MONTHLY: WINDOW_MONTH,
}


@dataclass(frozen=True)
class Window:
    kind: str
    start: Optional[datetime]
    end: Optional[datetime]  # exclusive

    def as_dict(self):
        return {
            'kind': self.kind,
            'start': self.start.isoformat() if self.start else None,
            'end': self.end.isoformat() if self.end else None,
        }


@dataclass
class Totals:
    duration: int = 0
    sessions: int = 0
    points: int = 0

    @property
    def minutes(self):
        return self.duration // 60

    @property
    def hours(self):
        return self.duration // 3600

    def as_dict(self):
        return {
            'seconds': self.duration,
            'minutes': self.minutes,
            'hours': self.hours,
            'sessions': self.sessions,
            'points': self.points,
        }


@dataclass
class CategoryStat:
    category_id: int
    name: str
    color: str
    duration: int
    count: int


@dataclass
class GoalProgress:
    goal_id: int
    category_id: int
    category_name: str
    category_color: str
    period: str
    target_minutes: int
    current_minutes: int
    percentage: int
    is_completed: bool


@dataclass
class Aggregates:
    window: Window
    totals: Totals
    category_breakdown: List[CategoryStat]
    streak: int
    goal_progress: List[GoalProgress]
    daily_minutes: int = 0
    total_hours: int = 0
    goals_completed: int = 0
    max_category_hours: int = 0
    unique_categories: int = 0
    longest_session_minutes: int = 0
    weekend_sessions: int = 0
    start_hours: FrozenSet[int] = field(default_factory=frozenset)

    def as_dict(self):
        return {
            'window': self.window.as_dict(),
            'totals': self.totals.as_dict(),
            'category_breakdown': [asdict(c) for c in self.category_breakdown],
            'streak': self.streak,
            'goal_progress': [asdict(g) for g in self.goal_progress],
            'stats': {
                'daily_minutes': self.daily_minutes,
                'total_hours': self.total_hours,
                'goals_completed': self.goals_completed,
                'max_category_hours': self.max_category_hours,
                'unique_categories': self.unique_categories,
                'longest_session_minutes': self.longest_session_minutes,
                'weekend_sessions': self.weekend_sessions,
            },
        }


@dataclass
class DayStat:
    """One local calendar day of completed entries."""
    day: date
    duration: int = 0
    sessions: List[dict] = field(default_factory=list)
    categories: List[CategoryStat] = field(default_factory=list)
    achievements: List[dict] = field(default_factory=list)
    goal_progress: List[GoalProgress] = field(default_factory=list)

    @property
    def total_minutes(self):
        return self.duration // 60

    @property
    def session_count(self):
        return len(self.sessions)

    @property
    def has_data(self):
        return bool(self.sessions)

    @property
    def intensity(self):
        return min(100, round_half_up(self.total_minutes / FULL_INTENSITY_MINUTES * 100))

    def as_dict(self):
        return {
            'date': self.day.isoformat(),
            'total_minutes': self.total_minutes,
            'total_sessions': self.session_count,
            'categories': [asdict(c) for c in self.categories],
            'sessions': self.sessions,
            'achievements': self.achievements,
            'goal_progress': [asdict(g) for g in self.goal_progress],
            'intensity': self.intensity,
            'has_data': self.has_data,
        }


def round_half_up(value):
    return math.floor(value + 0.5)


def goal_percentage(current_minutes, target_minutes):
    """
    Whole-number percentage of target reached, capped at 100.
    Halves round up. A non-positive target yields 0.
    """
    if not target_minutes or target_minutes <= 0:
        return 0
    return min(100, round_half_up(current_minutes / target_minutes * 100))


class AggregateCalculator:
    """Read-only statistics for one user, evaluated at a fixed instant."""

    def __init__(self, user, tz=None, now=None, lookback_days=None):
        self.user = user
        self.tz = tz or pytz.UTC
        self.now = now or timezone.now()
        self.today = local_today(self.tz, self.now)
        self.lookback_days = lookback_days or get_timer_policy().streak_lookback_days

    def completed_entries(self):
        return TimeEntry.objects.for_user(self.user).completed()

    def window(self, kind=WINDOW_DAY, start=None, end=None, anchor=None):
        """
        Resolve a window kind to local [start, end) datetimes.

        Day, week, month, year and trend windows are placed around anchor
        (default today); trend is the anchor day plus the 90 days before it.
        For 'custom', start and end are inclusive calendar dates.
        """
        anchor = anchor or self.today
        if kind == WINDOW_DAY:
            return Window(kind, *day_bounds(anchor, self.tz))
        if kind == WINDOW_WEEK:
            monday = anchor - timedelta(days=anchor.weekday())
            return Window(kind, day_bounds(monday, self.tz)[0], day_bounds(monday + timedelta(days=6), self.tz)[1])
        if kind == WINDOW_MONTH:
            first = anchor.replace(day=1)
            next_first = (first + timedelta(days=32)).replace(day=1)
            return Window(kind, day_bounds(first, self.tz)[0], day_bounds(next_first, self.tz)[0])
        if kind == WINDOW_YEAR:
            first = anchor.replace(month=1, day=1)
            return Window(kind, day_bounds(first, self.tz)[0], day_bounds(first.replace(year=first.year + 1), self.tz)[0])
        if kind == WINDOW_TREND:
            first = anchor - timedelta(days=TREND_DAYS)
            return Window(kind, day_bounds(first, self.tz)[0], day_bounds(anchor, self.tz)[1])
        if kind == WINDOW_CUSTOM:
            if not isinstance(start, date) or not isinstance(end, date):
                raise ValidationError("custom windows need start and end dates")
            if end < start:
                raise ValidationError("window end must not be before its start")
            return Window(kind, day_bounds(start, self.tz)[0], day_bounds(end, self.tz)[1])
        if kind == WINDOW_ALL:
            return Window(kind, None, None)
        raise ValidationError(f"unknown window '{kind}'")

    def _in_window(self, queryset, window):
        if window.start is None:
            return queryset
        return queryset.started_between(window.start, window.end)

    def totals(self, window):
        result = self._in_window(self.completed_entries(), window).aggregate(
            duration=Coalesce(Sum('duration'), 0),
            points=Coalesce(Sum('points'), 0),
            sessions=Count('id'),
        )
        return Totals(duration=result['duration'], sessions=result['sessions'], points=result['points'])

    def category_breakdown(self, window):
        """Per-category duration and session count, largest first."""
        rows = (
            self._in_window(self.completed_entries(), window)
            .values('category_id', 'category__name', 'category__color')
            .annotate(duration=Sum('duration'), count=Count('id'))
            .order_by('-duration', 'category__name')
        )
        return [
            CategoryStat(
                category_id=row['category_id'],
                name=row['category__name'],
                color=row['category__color'],
                duration=row['duration'] or 0,
                count=row['count'],
            )
            for row in rows
        ]

    def active_days(self):
        """Local dates within the lookback range that have a completed entry."""
        earliest = self.today - timedelta(days=self.lookback_days - 1)
        start = day_bounds(earliest, self.tz)[0]
        end = day_bounds(self.today, self.tz)[1]
        start_times = self.completed_entries().started_between(start, end).values_list('start_time', flat=True)
        return {st.astimezone(self.tz).date() for st in start_times}

    def streak(self):
        """
        Consecutive days with a completed entry, counting back from today.
        Zero when today has none; never more than the lookback.
        """
        days = self.active_days()
        count = 0
        day = self.today
        while count < self.lookback_days and day in days:
            count += 1
            day -= timedelta(days=1)
        return count

    def longest_streak(self):
        """Longest run of consecutive active days within the lookback."""
        longest = run = 0
        previous = None
        for day in sorted(self.active_days()):
            run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
            longest = max(longest, run)
            previous = day
        return longest

    def _progress(self, goal, current_minutes):
        percentage = goal_percentage(current_minutes, goal.target_minutes)
        return GoalProgress(
            goal_id=goal.pk,
            category_id=goal.category_id,
            category_name=goal.category.name,
            category_color=goal.category.color,
            period=goal.period,
            target_minutes=goal.target_minutes,
            current_minutes=current_minutes,
            percentage=percentage,
            is_completed=percentage >= 100,
        )

    def goal_progress(self, goals=None):
        if goals is None:
            goals = Goal.objects.active().filter(user=self.user).select_related('category')

        windows = {}
        progress = []
        for goal in goals:
            kind = PERIOD_WINDOWS.get(goal.period, WINDOW_DAY)
            if kind not in windows:
                windows[kind] = self.window(kind)
            seconds = self._in_window(self.completed_entries(), windows[kind]).filter(
                category_id=goal.category_id
            ).aggregate(total=Coalesce(Sum('duration'), 0))['total']
            progress.append(self._progress(goal, seconds // 60))
        return progress

    def daily_breakdown(self, window):
        """
        One DayStat per local day of a bounded window: sessions, minutes per
        category, achievements unlocked that day and daily goal progress.
        Days without entries are included.
        """
        if window.start is None:
            raise ValidationError("a daily breakdown needs a bounded window")
        first = window.start.astimezone(self.tz).date()
        last = window.end.astimezone(self.tz).date() - timedelta(days=1)
        count = (last - first).days + 1
        if count > MAX_BREAKDOWN_DAYS:
            raise ValidationError(f"a daily breakdown covers at most {MAX_BREAKDOWN_DAYS} days")

        days = {first + timedelta(days=i): DayStat(first + timedelta(days=i)) for i in range(count)}

        per_category = {}
        entries = self._in_window(self.completed_entries(), window).select_related('category').order_by('start_time')
        for entry in entries:
            local_day = entry.start_time.astimezone(self.tz).date()
            day = days.get(local_day)
            if day is None:
                continue
            day.duration += entry.duration
            day.sessions.append({
                'id': entry.pk,
                'start_time': entry.start_time.isoformat(),
                'end_time': entry.end_time.isoformat(),
                'duration': entry.duration,
                'points': entry.points,
                'description': entry.description,
                'category_id': entry.category_id,
                'category_name': entry.category.name,
            })
            stat = per_category.get((local_day, entry.category_id))
            if stat is None:
                stat = CategoryStat(
                    category_id=entry.category_id,
                    name=entry.category.name,
                    color=entry.category.color,
                    duration=0,
                    count=0,
                )
                per_category[(local_day, entry.category_id)] = stat
                day.categories.append(stat)
            stat.duration += entry.duration
            stat.count += 1

        unlocks = UserAchievement.objects.filter(
            user=self.user, achieved_at__gte=window.start, achieved_at__lt=window.end,
        ).select_related('achievement')
        for unlock in unlocks:
            day = days.get(unlock.achieved_at.astimezone(self.tz).date())
            if day is not None:
                day.achievements.append({
                    'id': unlock.achievement_id,
                    'name': unlock.achievement.name,
                    'icon': unlock.achievement.icon,
                    'points': unlock.achievement.points,
                })

        # Only daily goals are measured against a single day
        daily_goals = list(
            Goal.objects.active().filter(user=self.user, period=GoalPeriod.DAILY).select_related('category')
        )
        for day in days.values():
            day.categories.sort(key=lambda c: (-c.duration, c.name))
            for goal in daily_goals:
                seconds = sum(c.duration for c in day.categories if c.category_id == goal.category_id)
                day.goal_progress.append(self._progress(goal, seconds // 60))

        return [days[d] for d in sorted(days)]

    def _session_shape(self):
        """Longest session, weekend session count and local start hours."""
        longest = self.completed_entries().aggregate(longest=Max('duration'))['longest'] or 0
        weekend = 0
        hours = set()
        for start_time in self.completed_entries().values_list('start_time', flat=True):
            local = start_time.astimezone(self.tz)
            hours.add(local.hour)
            if local.weekday() >= 5:
                weekend += 1
        return longest // 60, weekend, frozenset(hours)

    def compute(self, kind=WINDOW_DAY, start=None, end=None):
        window = self.window(kind, start, end)
        goal_progress = self.goal_progress()
        all_time = self.window(WINDOW_ALL)
        per_category = self.category_breakdown(all_time)
        longest_minutes, weekend_sessions, start_hours = self._session_shape()

        return Aggregates(
            window=window,
            totals=self.totals(window),
            category_breakdown=self.category_breakdown(window),
            streak=self.streak(),
            goal_progress=goal_progress,
            daily_minutes=self.totals(self.window(WINDOW_DAY)).minutes,
            total_hours=self.totals(all_time).hours,
            goals_completed=sum(1 for g in goal_progress if g.is_completed),
            max_category_hours=max((c.duration for c in per_category), default=0) // 3600,
            unique_categories=len(per_category),
            longest_session_minutes=longest_minutes,
            weekend_sessions=weekend_sessions,
            start_hours=start_hours,
        )


def compute_aggregates(user, window=WINDOW_DAY, tz=None, start=None, end=None, now=None):
    """Aggregates for user over the given window."""
    return AggregateCalculator(user, tz=tz, now=now).compute(window, start, end)
