from django.conf import settings
from django.db import models


class AchievementCategory(models.TextChoices):
    STREAK = 'streak', 'Streak'
    TIME = 'time', 'Time'
    GOAL = 'goal', 'Goal'
    PERFORMANCE = 'performance', 'Performance'
    TOTAL = 'total', 'Total'
    CATEGORY = 'category', 'Category'


class Rarity(models.TextChoices):
    COMMON = 'common', 'Common'
    RARE = 'rare', 'Rare'
    EPIC = 'epic', 'Epic'
    LEGENDARY = 'legendary', 'Legendary'


class Achievement(models.Model):
    """
    A badge in the achievement catalog.

    Rows mirror achievements/catalog.py and are upserted by the
    sync_achievements command or lazily by the evaluator.
    """
    achievement_id = models.CharField(
        max_length=50,
        primary_key=True,
        help_text="Stable identifier, e.g. 'streak_beginner'"
    )
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True)
    icon = models.CharField(
        max_length=50,
        blank=True,
        help_text="Icon name shown next to the badge"
    )
    category = models.CharField(
        max_length=20,
        choices=AchievementCategory.choices,
        db_index=True
    )
    rarity = models.CharField(
        max_length=20,
        choices=Rarity.choices,
        default=Rarity.COMMON
    )
    points = models.PositiveIntegerField(default=0)
    condition_type = models.CharField(
        max_length=50,
        help_text="Statistic the unlock condition is checked against"
    )
    condition_value = models.PositiveIntegerField(
        help_text="Threshold the statistic must reach"
    )
    time_range_start = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        help_text="Local start hour for time_range_work conditions"
    )
    time_range_end = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        help_text="Local end hour (exclusive) for time_range_work conditions"
    )

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['category', 'condition_value']
        verbose_name = 'Achievement'
        verbose_name_plural = 'Achievements'

    def __str__(self):
        return f"{self.name} ({self.get_rarity_display()})"


class UserAchievement(models.Model):
    """An achievement unlocked by a user. Never revoked."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='achievements'
    )
    achievement = models.ForeignKey(
        Achievement,
        on_delete=models.CASCADE,
        related_name='unlocks'
    )
    achieved_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-achieved_at']
        unique_together = ['user', 'achievement']
        verbose_name = 'User Achievement'
        verbose_name_plural = 'User Achievements'

    def __str__(self):
        return f"{self.user} - {self.achievement.name}"
