"""Tests for totals, streaks and goal progress."""
from datetime import date, datetime, timedelta, timezone as dt_timezone

import pytz
from django.contrib.auth.models import User
from django.test import TestCase

from dashboard.services.aggregates import (
    AggregateCalculator,
    WINDOW_ALL,
    WINDOW_CUSTOM,
    WINDOW_DAY,
    WINDOW_MONTH,
    WINDOW_WEEK,
    compute_aggregates,
    goal_percentage,
)
from goals.models import Goal, GoalPeriod
from time_entries.exceptions import ValidationError
from time_entries.models import TimeEntry

# Thursday
NOW = datetime(2026, 3, 12, 12, 0, tzinfo=dt_timezone.utc)


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


class AggregateTestBase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='alice', password='pw')
        self.reading = self.user.categories.get(name='Reading')
        self.music = self.user.categories.get(name='Music')

    def make_entry(self, start, minutes, category=None, seconds=None):
        duration = seconds if seconds is not None else minutes * 60
        return TimeEntry.objects.create(
            user=self.user,
            category=category or self.reading,
            start_time=start,
            end_time=start + timedelta(seconds=duration),
            duration=duration,
            points=duration // 60,
        )

    def calculator(self, tz=None, now=NOW, **kwargs):
        return AggregateCalculator(self.user, tz=tz, now=now, **kwargs)


class StreakTests(AggregateTestBase):

    def test_three_consecutive_days(self):
        for days_back in range(3):
            self.make_entry(utc(2026, 3, 12, 9) - timedelta(days=days_back), 20)
        self.assertEqual(self.calculator().streak(), 3)

    def test_no_session_today_means_zero(self):
        self.make_entry(utc(2026, 3, 11, 9), 20)
        self.make_entry(utc(2026, 3, 10, 9), 20)
        self.assertEqual(self.calculator().streak(), 0)

    def test_gap_ends_streak(self):
        self.make_entry(utc(2026, 3, 12, 9), 20)
        self.make_entry(utc(2026, 3, 10, 9), 20)
        self.assertEqual(self.calculator().streak(), 1)

    def test_multiple_sessions_on_one_day_count_once(self):
        self.make_entry(utc(2026, 3, 12, 8), 20)
        self.make_entry(utc(2026, 3, 12, 10), 20)
        self.assertEqual(self.calculator().streak(), 1)

    def test_open_and_empty_entries_do_not_count(self):
        TimeEntry.objects.create(user=self.user, category=self.reading, start_time=utc(2026, 3, 12, 9))
        self.make_entry(utc(2026, 3, 11, 9), 0, seconds=0)
        self.assertEqual(self.calculator().streak(), 0)

    def test_days_follow_user_timezone(self):
        new_york = pytz.timezone('America/New_York')
        # 23:00 on the 11th in New York
        now = utc(2026, 3, 12, 3)
        self.make_entry(utc(2026, 3, 11, 15), 20)
        self.make_entry(utc(2026, 3, 10, 15), 20)
        self.assertEqual(self.calculator(tz=new_york, now=now).streak(), 2)
        self.assertEqual(self.calculator(now=now).streak(), 0)

    def test_midnight_starts_a_new_day(self):
        self.make_entry(utc(2026, 3, 11, 9), 20)
        self.assertEqual(self.calculator(now=utc(2026, 3, 12, 0, 0)).streak(), 0)
        self.assertEqual(self.calculator(now=utc(2026, 3, 11, 23, 59, 59)).streak(), 1)

    def test_streak_is_bounded_by_lookback(self):
        for days_back in range(7):
            self.make_entry(utc(2026, 3, 12, 9) - timedelta(days=days_back), 20)
        self.assertEqual(self.calculator(lookback_days=5).streak(), 5)


class WindowTests(AggregateTestBase):

    def test_day_window(self):
        window = self.calculator().window(WINDOW_DAY)
        self.assertEqual(window.start, utc(2026, 3, 12))
        self.assertEqual(window.end, utc(2026, 3, 13))

    def test_week_starts_on_monday(self):
        window = self.calculator().window(WINDOW_WEEK)
        self.assertEqual(window.start, utc(2026, 3, 9))
        self.assertEqual(window.end, utc(2026, 3, 16))

    def test_month_window(self):
        window = self.calculator().window(WINDOW_MONTH)
        self.assertEqual(window.start, utc(2026, 3, 1))
        self.assertEqual(window.end, utc(2026, 4, 1))

    def test_custom_window_is_inclusive(self):
        window = self.calculator().window(WINDOW_CUSTOM, date(2026, 3, 1), date(2026, 3, 3))
        self.assertEqual(window.start, utc(2026, 3, 1))
        self.assertEqual(window.end, utc(2026, 3, 4))

    def test_custom_window_validation(self):
        calc = self.calculator()
        with self.assertRaises(ValidationError):
            calc.window(WINDOW_CUSTOM, date(2026, 3, 3), date(2026, 3, 1))
        with self.assertRaises(ValidationError):
            calc.window(WINDOW_CUSTOM)
        with self.assertRaises(ValidationError):
            calc.window('fortnight')

    def test_dst_day_is_23_hours(self):
        new_york = pytz.timezone('America/New_York')
        window = self.calculator(tz=new_york, now=utc(2026, 3, 8, 17)).window(WINDOW_DAY)
        self.assertEqual(window.end - window.start, timedelta(hours=23))


class TotalsTests(AggregateTestBase):

    def test_totals_only_count_completed_entries_in_window(self):
        self.make_entry(utc(2026, 3, 12, 9), 30)
        self.make_entry(utc(2026, 3, 12, 10), 15, category=self.music)
        self.make_entry(utc(2026, 3, 11, 9), 60)
        TimeEntry.objects.create(user=self.user, category=self.reading, start_time=utc(2026, 3, 12, 11))

        calc = self.calculator()
        today = calc.totals(calc.window(WINDOW_DAY))
        self.assertEqual(today.duration, 2700)
        self.assertEqual(today.minutes, 45)
        self.assertEqual(today.sessions, 2)
        self.assertEqual(today.points, 45)

        week = calc.totals(calc.window(WINDOW_WEEK))
        self.assertEqual(week.minutes, 105)

    def test_other_users_entries_are_ignored(self):
        other = User.objects.create_user(username='bob', password='pw')
        TimeEntry.objects.create(
            user=other, category=other.categories.get(name='Reading'),
            start_time=utc(2026, 3, 12, 9), end_time=utc(2026, 3, 12, 10), duration=3600, points=60,
        )
        calc = self.calculator()
        self.assertEqual(calc.totals(calc.window(WINDOW_ALL)).duration, 0)

    def test_category_breakdown_sorted_by_duration(self):
        self.make_entry(utc(2026, 3, 12, 8), 10)
        self.make_entry(utc(2026, 3, 12, 9), 40, category=self.music)
        self.make_entry(utc(2026, 3, 12, 10), 5)

        calc = self.calculator()
        breakdown = calc.category_breakdown(calc.window(WINDOW_DAY))
        self.assertEqual([c.name for c in breakdown], ['Music', 'Reading'])
        self.assertEqual(breakdown[0].duration, 2400)
        self.assertEqual(breakdown[1].count, 2)
        self.assertEqual(breakdown[1].color, self.reading.color)


class GoalProgressTests(AggregateTestBase):

    def test_percentage_rounding(self):
        self.assertEqual(goal_percentage(90, 120), 75)
        self.assertEqual(goal_percentage(150, 120), 100)
        self.assertEqual(goal_percentage(1, 8), 13)
        self.assertEqual(goal_percentage(0, 30), 0)

    def test_zero_target_is_zero_percent(self):
        self.assertEqual(goal_percentage(45, 0), 0)

    def test_daily_goal_in_progress(self):
        Goal.objects.create(user=self.user, category=self.reading, target_minutes=120)
        self.make_entry(utc(2026, 3, 12, 8), 90)
        [progress] = self.calculator().goal_progress()
        self.assertEqual(progress.current_minutes, 90)
        self.assertEqual(progress.percentage, 75)
        self.assertFalse(progress.is_completed)

    def test_daily_goal_completed_and_capped(self):
        Goal.objects.create(user=self.user, category=self.reading, target_minutes=120)
        self.make_entry(utc(2026, 3, 12, 8), 150)
        [progress] = self.calculator().goal_progress()
        self.assertEqual(progress.percentage, 100)
        self.assertTrue(progress.is_completed)

    def test_weekly_goal_counts_since_monday(self):
        Goal.objects.create(user=self.user, category=self.reading, target_minutes=300, period=GoalPeriod.WEEKLY)
        self.make_entry(utc(2026, 3, 9, 8), 60)
        self.make_entry(utc(2026, 3, 12, 8), 30)
        # Sunday belongs to the previous week
        self.make_entry(utc(2026, 3, 8, 8), 600)
        [progress] = self.calculator().goal_progress()
        self.assertEqual(progress.current_minutes, 90)
        self.assertEqual(progress.percentage, 30)

    def test_only_goal_category_counts(self):
        Goal.objects.create(user=self.user, category=self.reading, target_minutes=60)
        self.make_entry(utc(2026, 3, 12, 8), 60, category=self.music)
        [progress] = self.calculator().goal_progress()
        self.assertEqual(progress.current_minutes, 0)

    def test_inactive_goals_are_skipped(self):
        goal = Goal.objects.create(user=self.user, category=self.reading, target_minutes=60)
        goal.deactivate()
        self.assertEqual(self.calculator().goal_progress(), [])


class ComputeAggregatesTests(AggregateTestBase):

    def test_achievement_statistics(self):
        # Saturday 7th, 07:00 UTC, 2 hours
        self.make_entry(utc(2026, 3, 7, 7), 120)
        self.make_entry(utc(2026, 3, 12, 9), 45, category=self.music)
        Goal.objects.create(user=self.user, category=self.music, target_minutes=30)

        aggregates = compute_aggregates(self.user, now=NOW)
        self.assertEqual(aggregates.window.kind, WINDOW_DAY)
        self.assertEqual(aggregates.daily_minutes, 45)
        self.assertEqual(aggregates.total_hours, 2)
        self.assertEqual(aggregates.max_category_hours, 2)
        self.assertEqual(aggregates.unique_categories, 2)
        self.assertEqual(aggregates.longest_session_minutes, 120)
        self.assertEqual(aggregates.weekend_sessions, 1)
        self.assertEqual(aggregates.start_hours, frozenset({7, 9}))
        self.assertEqual(aggregates.goals_completed, 1)
        self.assertEqual(aggregates.streak, 1)

    def test_empty_history(self):
        aggregates = compute_aggregates(self.user, window=WINDOW_MONTH, now=NOW)
        self.assertEqual(aggregates.totals.duration, 0)
        self.assertEqual(aggregates.category_breakdown, [])
        self.assertEqual(aggregates.streak, 0)
        self.assertEqual(aggregates.longest_session_minutes, 0)

    def test_as_dict_is_json_ready(self):
        self.make_entry(utc(2026, 3, 12, 9), 30)
        data = compute_aggregates(self.user, now=NOW).as_dict()
        self.assertEqual(data['totals']['minutes'], 30)
        self.assertEqual(data['window']['start'], '2026-03-12T00:00:00+00:00')
        self.assertEqual(data['stats']['daily_minutes'], 30)
