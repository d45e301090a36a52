"""Tests for the timer lifecycle: start, stop, cancel and stale reconciliation."""
from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import patch

import pytz
from django.contrib.auth.models import User
from django.db.models import RestrictedError
from django.test import TestCase

from categories.models import Category
from settings.models import Setting
from settings.policy import STALE_CAP_KEY, STALE_THRESHOLD_KEY
from time_entries.exceptions import ConflictError, InvalidCategoryError, NotFoundError
from time_entries.models import TimeEntry
from time_entries.services.timer import AUTO_CLOSED_SUFFIX, TimerService

T0 = datetime(2026, 3, 10, 10, 0, 0, tzinfo=dt_timezone.utc)


def at(moment):
    return patch('django.utils.timezone.now', return_value=moment)


class TimerServiceTestBase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='alice', password='pw')
        self.reading = self.user.categories.get(name='Reading')
        self.music = self.user.categories.get(name='Music')
        self.service = TimerService(self.user)

    def open_count(self):
        return TimeEntry.objects.open().for_user(self.user).count()


class StartSessionTests(TimerServiceTestBase):

    def test_start_creates_open_entry(self):
        with at(T0):
            entry = self.service.start_session(self.reading.pk, description='Dune')
        self.assertIsNone(entry.end_time)
        self.assertEqual(entry.start_time, T0)
        self.assertEqual(entry.duration, 0)
        self.assertEqual(entry.points, 0)
        self.assertEqual(entry.description, 'Dune')
        self.assertEqual(self.service.get_active_session(), entry)

    def test_second_start_conflicts(self):
        with at(T0):
            first = self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=5)):
            with self.assertRaises(ConflictError) as ctx:
                self.service.start_session(self.music.pk)
        self.assertIn('Reading', ctx.exception.message)
        self.assertIn('10:00:00', ctx.exception.message)
        self.assertEqual(ctx.exception.active_entry, first)
        self.assertEqual(self.open_count(), 1)

    def test_conflict_message_uses_local_time(self):
        service = TimerService(self.user, tz=pytz.timezone('Europe/Istanbul'))
        with at(T0):
            service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=5)):
            with self.assertRaises(ConflictError) as ctx:
                service.start_session(self.music.pk)
        # 10:00 UTC is 13:00 in Istanbul
        self.assertIn('13:00:00', ctx.exception.message)

    def test_force_close_stops_running_timer_first(self):
        with at(T0):
            first = self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=30)):
            second = self.service.start_session(self.music.pk, force_close=True)

        first.refresh_from_db()
        self.assertEqual(first.end_time, T0 + timedelta(minutes=30))
        self.assertEqual(first.duration, 1800)
        self.assertEqual(first.points, 30)
        self.assertTrue(second.is_open)
        self.assertEqual(second.category, self.music)
        self.assertEqual(self.open_count(), 1)

    def test_missing_category_is_rejected(self):
        for value in (None, ''):
            with self.assertRaises(InvalidCategoryError):
                self.service.start_session(value)
        self.assertEqual(self.open_count(), 0)

    def test_malformed_category_id_is_rejected(self):
        with self.assertRaises(InvalidCategoryError):
            self.service.start_session('not-a-number')

    def test_other_users_category_is_rejected(self):
        other = User.objects.create_user(username='bob', password='pw')
        foreign = other.categories.get(name='Reading')
        with self.assertRaises(InvalidCategoryError):
            self.service.start_session(foreign.pk)
        self.assertFalse(TimeEntry.objects.exists())

    def test_invalid_category_leaves_running_timer_alone(self):
        with at(T0):
            running = self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=1)):
            with self.assertRaises(InvalidCategoryError):
                self.service.start_session(999999, force_close=True)
        running.refresh_from_db()
        self.assertTrue(running.is_open)

    def test_constraint_violation_surfaces_as_conflict(self):
        """A start that slips past the guard is stopped by the database."""
        with at(T0):
            self.service.start_session(self.reading.pk)
        with patch.object(TimerService, 'get_active_session', return_value=None):
            with at(T0 + timedelta(minutes=1)):
                with self.assertRaises(ConflictError):
                    self.service.start_session(self.music.pk)
        self.assertEqual(self.open_count(), 1)

    def test_custom_category_can_be_tracked(self):
        chess = Category.objects.create(user=self.user, name='Chess')
        entry = self.service.start_session(chess.pk)
        self.assertEqual(entry.category, chess)


class StopSessionTests(TimerServiceTestBase):

    def test_stop_sets_duration_and_points(self):
        with at(T0):
            entry = self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(seconds=125)):
            stopped = self.service.stop_session(entry.pk)
        self.assertEqual(stopped.end_time, T0 + timedelta(seconds=125))
        self.assertEqual(stopped.duration, 125)
        self.assertEqual(stopped.points, 2)
        self.assertIsNone(self.service.get_active_session())

    def test_stop_without_id_stops_running_timer(self):
        with at(T0):
            self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=10)):
            stopped = self.service.stop_session()
        self.assertEqual(stopped.duration, 600)

    def test_stop_with_nothing_running(self):
        with self.assertRaises(NotFoundError):
            self.service.stop_session()

    def test_stop_twice(self):
        with at(T0):
            entry = self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=1)):
            self.service.stop_session(entry.pk)
        with at(T0 + timedelta(minutes=2)):
            with self.assertRaises(NotFoundError):
                self.service.stop_session(entry.pk)
        entry.refresh_from_db()
        self.assertEqual(entry.duration, 60)

    def test_cannot_stop_another_users_timer(self):
        other = User.objects.create_user(username='bob', password='pw')
        entry = TimerService(other).start_session(other.categories.get(name='Reading').pk)
        with self.assertRaises(NotFoundError):
            self.service.stop_session(entry.pk)
        entry.refresh_from_db()
        self.assertTrue(entry.is_open)

    def test_stop_unlocks_achievements(self):
        with at(T0):
            entry = self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=31)):
            stopped = self.service.stop_session(entry.pk)
        unlocked = [a.achievement_id for a in stopped.unlocked_achievements]
        self.assertIn('time_first_step', unlocked)
        self.assertTrue(self.user.achievements.filter(achievement_id='time_first_step').exists())

    def test_achievement_failure_does_not_undo_stop(self):
        with at(T0):
            entry = self.service.start_session(self.reading.pk)
        with patch('achievements.services.evaluator.evaluate_achievements', side_effect=RuntimeError('boom')):
            with at(T0 + timedelta(minutes=31)):
                stopped = self.service.stop_session(entry.pk)
        self.assertEqual(stopped.unlocked_achievements, [])
        entry.refresh_from_db()
        self.assertEqual(entry.duration, 1860)
        self.assertFalse(self.user.achievements.exists())


class CancelSessionTests(TimerServiceTestBase):

    def test_cancel_deletes_open_entry(self):
        entry = self.service.start_session(self.reading.pk)
        self.service.cancel_session(entry.pk)
        self.assertFalse(TimeEntry.objects.filter(pk=entry.pk).exists())

    def test_cancel_after_stop(self):
        with at(T0):
            entry = self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=5)):
            self.service.stop_session(entry.pk)
        with self.assertRaises(NotFoundError):
            self.service.cancel_session(entry.pk)
        self.assertTrue(TimeEntry.objects.filter(pk=entry.pk).exists())

    def test_stop_after_cancel(self):
        entry = self.service.start_session(self.reading.pk)
        self.service.cancel_session(entry.pk)
        with self.assertRaises(NotFoundError):
            self.service.stop_session(entry.pk)

    def test_cancel_requires_id(self):
        with self.assertRaises(NotFoundError):
            self.service.cancel_session(None)


class StaleReconciliationTests(TimerServiceTestBase):

    def make_open_entry(self, started, description='Night reading'):
        return TimeEntry.objects.create(
            user=self.user,
            category=self.reading,
            start_time=started,
            description=description,
        )

    def test_stale_entry_is_closed_with_capped_duration(self):
        stale = self.make_open_entry(T0 - timedelta(hours=25))
        with at(T0):
            new = self.service.start_session(self.music.pk)

        stale.refresh_from_db()
        self.assertEqual(stale.duration, 28800)
        self.assertEqual(stale.points, 480)
        self.assertEqual(stale.end_time, stale.start_time + timedelta(seconds=28800))
        self.assertEqual(stale.description, 'Night reading' + AUTO_CLOSED_SUFFIX)
        self.assertTrue(new.is_open)
        self.assertEqual(self.open_count(), 1)

    def test_recent_entry_is_not_stale(self):
        self.make_open_entry(T0 - timedelta(hours=23))
        with at(T0):
            with self.assertRaises(ConflictError):
                self.service.start_session(self.music.pk)

    def test_reconcile_returns_count(self):
        self.make_open_entry(T0 - timedelta(hours=30))
        with at(T0):
            self.assertEqual(self.service.reconcile_stale_sessions(), 1)
            self.assertEqual(self.service.reconcile_stale_sessions(), 0)

    def test_threshold_and_cap_come_from_settings(self):
        Setting.set(STALE_THRESHOLD_KEY, '2')
        Setting.set(STALE_CAP_KEY, '3600')
        stale = self.make_open_entry(T0 - timedelta(hours=3), description='')
        with at(T0):
            TimerService(self.user).reconcile_stale_sessions()
        stale.refresh_from_db()
        self.assertEqual(stale.duration, 3600)
        self.assertEqual(stale.points, 60)
        self.assertEqual(stale.description, AUTO_CLOSED_SUFFIX)

    def test_failure_on_one_entry_is_logged_not_raised(self):
        self.make_open_entry(T0 - timedelta(hours=30))
        with patch.object(TimerService, '_close_stale_entry', side_effect=RuntimeError('db down')):
            with at(T0):
                with self.assertLogs('time_entries.services.timer', level='ERROR'):
                    closed = self.service.reconcile_stale_sessions()
        self.assertEqual(closed, 0)
        self.assertEqual(self.open_count(), 1)


class ForceCloseAllTests(TimerServiceTestBase):

    def test_closes_open_entry(self):
        with at(T0):
            self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=45)):
            closed = self.service.force_close_all()
        self.assertEqual(len(closed), 1)
        self.assertEqual(closed[0].duration, 2700)
        self.assertEqual(self.open_count(), 0)

    def test_nothing_open(self):
        self.assertEqual(self.service.force_close_all(), [])

    def test_per_entry_failure_is_isolated(self):
        self.service.start_session(self.reading.pk)
        with patch.object(TimerService, 'stop_session', side_effect=RuntimeError('locked')):
            with self.assertLogs('time_entries.services.timer', level='ERROR'):
                closed = self.service.force_close_all()
        self.assertEqual(closed, [])


class AccountDeletionTests(TimerServiceTestBase):
    """Removing a user takes their categories and time entries with them."""

    def test_user_with_entries_can_be_deleted(self):
        with at(T0):
            self.service.start_session(self.reading.pk)
        with at(T0 + timedelta(minutes=20)):
            self.service.force_close_all()
            self.service.start_session(self.music.pk)

        user_id = self.user.pk
        self.user.delete()

        self.assertFalse(TimeEntry.objects.exists())
        self.assertFalse(Category.objects.filter(user_id=user_id).exists())

    def test_category_with_entries_cannot_be_deleted_alone(self):
        chess = Category.objects.create(user=self.user, name='Chess')
        with at(T0):
            self.service.start_session(chess.pk)
        with at(T0 + timedelta(minutes=5)):
            self.service.stop_session()

        with self.assertRaises(RestrictedError):
            chess.delete()
        self.assertTrue(Category.objects.filter(pk=chess.pk).exists())
