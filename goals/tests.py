from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import TestCase

from categories.models import Category
from goals.models import Goal, GoalPeriod


class GoalModelTests(TestCase):
    """Tests for the Goal model."""

    def setUp(self):
        self.user = User.objects.create_user(username='goalie', password='pw')
        self.category = self.user.categories.get(name='Reading')

    def test_create_goal_defaults_to_daily_and_active(self):
        goal = Goal.objects.create(user=self.user, category=self.category, target_minutes=120)
        self.assertEqual(goal.period, GoalPeriod.DAILY)
        self.assertTrue(goal.is_active)

    def test_str_describes_target(self):
        goal = Goal.objects.create(
            user=self.user, category=self.category, target_minutes=45, period=GoalPeriod.WEEKLY,
        )
        self.assertEqual(str(goal), 'Reading: 45 min weekly')

    def test_zero_target_is_rejected(self):
        with self.assertRaises(ValidationError):
            Goal.objects.create(user=self.user, category=self.category, target_minutes=0)
        self.assertFalse(Goal.objects.exists())

    def test_target_above_a_day_is_rejected(self):
        with self.assertRaises(ValidationError):
            Goal.objects.create(user=self.user, category=self.category, target_minutes=1441)

    def test_weekly_and_monthly_targets_may_exceed_a_day(self):
        weekly = Goal.objects.create(
            user=self.user, category=self.category, target_minutes=600 * 5, period=GoalPeriod.WEEKLY,
        )
        monthly = Goal.objects.create(
            user=self.user, category=self.category, target_minutes=31 * 1440, period=GoalPeriod.MONTHLY,
        )
        self.assertEqual(weekly.target_minutes, 3000)
        self.assertEqual(monthly.target_minutes, 44640)

    def test_target_above_a_week_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            Goal.objects.create(
                user=self.user, category=self.category, target_minutes=7 * 1440 + 1, period=GoalPeriod.WEEKLY,
            )
        self.assertIn('target_minutes', ctx.exception.message_dict)

    def test_one_goal_per_category_and_period(self):
        Goal.objects.create(user=self.user, category=self.category, target_minutes=30)
        with self.assertRaises(IntegrityError):
            Goal.objects.create(user=self.user, category=self.category, target_minutes=60)

    def test_same_category_different_periods_allowed(self):
        Goal.objects.create(user=self.user, category=self.category, target_minutes=30)
        Goal.objects.create(
            user=self.user, category=self.category, target_minutes=300, period=GoalPeriod.WEEKLY,
        )
        self.assertEqual(Goal.objects.count(), 2)

    def test_deactivate_is_soft_delete(self):
        goal = Goal.objects.create(user=self.user, category=self.category, target_minutes=30)
        goal.deactivate()
        goal.refresh_from_db()
        self.assertFalse(goal.is_active)
        self.assertFalse(Goal.objects.active().exists())


class GoalUpsertTests(TestCase):
    """Goal.objects.upsert_for creates or reactivates."""

    def setUp(self):
        self.user = User.objects.create_user(username='upsert', password='pw')
        self.category = self.user.categories.get(name='Exercise')

    def test_upsert_creates_goal(self):
        goal = Goal.objects.upsert_for(self.user, self.category, 90)
        self.assertEqual(goal.target_minutes, 90)
        self.assertEqual(Goal.objects.count(), 1)

    def test_upsert_updates_and_reactivates(self):
        goal = Goal.objects.upsert_for(self.user, self.category, 90)
        goal.deactivate()

        again = Goal.objects.upsert_for(self.user, self.category, 120)
        self.assertEqual(again.pk, goal.pk)
        self.assertEqual(again.target_minutes, 120)
        self.assertTrue(again.is_active)
        self.assertEqual(Goal.objects.count(), 1)

    def test_upsert_rejects_foreign_category(self):
        other = User.objects.create_user(username='other', password='pw')
        foreign = Category.objects.get(user=other, name='Exercise')
        with self.assertRaises(ValidationError):
            Goal.objects.upsert_for(self.user, foreign, 30)
