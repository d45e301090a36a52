from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

MINUTES_PER_DAY = 24 * 60


class GoalPeriod(models.TextChoices):
    DAILY = 'daily', 'Daily'
    WEEKLY = 'weekly', 'Weekly'
    MONTHLY = 'monthly', 'Monthly'


# A target can never exceed the minutes available in one period
MAX_TARGET_MINUTES = {
    GoalPeriod.DAILY: MINUTES_PER_DAY,
    GoalPeriod.WEEKLY: 7 * MINUTES_PER_DAY,
    GoalPeriod.MONTHLY: 31 * MINUTES_PER_DAY,
}


class GoalQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def upsert_for(self, user, category, target_minutes, period=GoalPeriod.DAILY):
        """
        Create the goal for (user, category, period), or update and
        reactivate the existing one.
        """
        if category.user_id != user.pk:
            raise ValidationError("Category does not belong to this user")
        goal = self.filter(user=user, category=category, period=period).first()
        if goal is None:
            goal = self.model(user=user, category=category, period=period)
        goal.target_minutes = target_minutes
        goal.is_active = True
        goal.save()
        return goal


class Goal(models.Model):
    """
    A per-category target of minutes within a period.
    Progress is computed from time entries on read and never stored.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='goals',
        help_text="Owner of this goal"
    )
    category = models.ForeignKey(
        'categories.Category',
        on_delete=models.CASCADE,
        related_name='goals',
        help_text="Category whose tracked time counts toward this goal"
    )
    target_minutes = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Target minutes per period (at most one full period)"
    )
    period = models.CharField(
        max_length=10,
        choices=GoalPeriod.choices,
        default=GoalPeriod.DAILY,
        help_text="Period the target applies to"
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive goals are kept but ignored"
    )

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = GoalQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'category', 'period'],
                name='one_goal_per_user_category_period',
            ),
        ]
        verbose_name = 'Goal'
        verbose_name_plural = 'Goals'

    def __str__(self):
        return f"{self.category.name}: {self.target_minutes} min {self.get_period_display().lower()}"

    def clean(self):
        limit = MAX_TARGET_MINUTES.get(self.period, MINUTES_PER_DAY)
        if self.target_minutes is not None and self.target_minutes > limit:
            raise ValidationError({
                'target_minutes': f"A {self.period} goal can be at most {limit} minutes"
            })

    def save(self, *args, **kwargs):
        # Reject zero and out-of-range targets before they reach progress math
        self.clean_fields(exclude=['user', 'category'])
        self.clean()
        super().save(*args, **kwargs)

    def deactivate(self):
        """Soft delete."""
        self.is_active = False
        self.save(update_fields=['is_active', 'updated_at'])
