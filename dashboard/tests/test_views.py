"""Tests for the dashboard JSON endpoints."""
from datetime import timedelta

from django.contrib.auth.models import User
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from goals.models import Goal
from time_entries.models import TimeEntry


class DashboardViewTests(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='alice', password='pw')
        self.client.force_login(self.user)
        self.reading = self.user.categories.get(name='Reading')

    def make_entry(self, minutes, start=None):
        start = start or timezone.now() - timedelta(minutes=minutes)
        return TimeEntry.objects.create(
            user=self.user,
            category=self.reading,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            duration=minutes * 60,
            points=minutes,
        )

    def test_dashboard_payload(self):
        self.make_entry(1)
        Goal.objects.create(user=self.user, category=self.reading, target_minutes=60)

        resp = self.client.get(reverse('dashboard:dashboard_api'))
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data['success'])
        self.assertEqual(set(data['time_stats']), {'today', 'week', 'month'})
        self.assertEqual(set(data['category_stats']), {'today', 'week', 'month', 'all_time'})
        self.assertEqual(data['total_stats']['total_minutes'], 1)
        self.assertEqual(data['total_stats']['total_sessions'], 1)
        self.assertEqual(data['total_stats']['total_badges'], 0)
        self.assertEqual(len(data['goal_progress']), 1)
        self.assertIn('today', data['dates'])

    def test_stats_default_window_is_today(self):
        self.make_entry(1)
        resp = self.client.get(reverse('dashboard:stats_api'))
        data = resp.json()
        self.assertEqual(data['window']['kind'], 'day')
        self.assertEqual(data['totals']['sessions'], 1)

    def test_stats_custom_window(self):
        resp = self.client.get(reverse('dashboard:stats_api'), {
            'window': 'custom', 'start': '2026-01-01', 'end': '2026-01-31',
        })
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['window']['kind'], 'custom')

    def test_stats_custom_window_bad_date(self):
        resp = self.client.get(reverse('dashboard:stats_api'), {
            'window': 'custom', 'start': 'January', 'end': '2026-01-31',
        })
        self.assertEqual(resp.status_code, 400)

    def test_stats_custom_window_missing_dates(self):
        resp = self.client.get(reverse('dashboard:stats_api'), {'window': 'custom'})
        self.assertEqual(resp.status_code, 400)

    def test_stats_unknown_window(self):
        resp = self.client.get(reverse('dashboard:stats_api'), {'window': 'decade'})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()['success'])

    def test_login_required(self):
        self.client.logout()
        resp = self.client.get(reverse('dashboard:dashboard_api'))
        self.assertEqual(resp.status_code, 302)


class CalendarViewTests(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='alice', password='pw')
        self.client.force_login(self.user)

    def test_month_by_default(self):
        resp = self.client.get(reverse('dashboard:calendar_api'), {'date': '2026-02-10'})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['view'], 'month')
        self.assertEqual(data['total_days'], 28)
        self.assertEqual(len(data['days']), 28)
        self.assertEqual(set(data['streak']), {'current', 'longest', 'is_active'})

    def test_explicit_range(self):
        resp = self.client.get(reverse('dashboard:calendar_api'), {'start': '2026-01-01', 'end': '2026-01-07'})
        self.assertEqual(resp.json()['total_days'], 7)

    def test_unknown_view(self):
        resp = self.client.get(reverse('dashboard:calendar_api'), {'view': 'decade'})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()['success'])

    def test_bad_date(self):
        resp = self.client.get(reverse('dashboard:calendar_api'), {'date': 'tomorrow'})
        self.assertEqual(resp.status_code, 400)

    def test_range_too_long(self):
        resp = self.client.get(reverse('dashboard:calendar_api'), {'start': '2020-01-01', 'end': '2026-01-01'})
        self.assertEqual(resp.status_code, 400)

    def test_login_required(self):
        self.client.logout()
        resp = self.client.get(reverse('dashboard:calendar_api'))
        self.assertEqual(resp.status_code, 302)
