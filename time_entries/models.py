from django.conf import settings
from django.db import models
from django.db.models import Q


class TimeEntryQuerySet(models.QuerySet):

    def open(self):
        """Entries whose timer is still running."""
        return self.filter(end_time__isnull=True)

    def completed(self):
        """Stopped entries that actually recorded time."""
        return self.filter(end_time__isnull=False, duration__gt=0)

    def for_user(self, user):
        return self.filter(user=user)

    def started_between(self, start, end):
        """Entries whose start_time falls in [start, end)."""
        return self.filter(start_time__gte=start, start_time__lt=end)


class TimeEntry(models.Model):
    """
    One interval of tracked work.

    Open while end_time is NULL; closed once stopped, at which point duration
    (whole seconds) and points (one per completed minute) are set.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='time_entries',
        help_text="Owner of this time entry"
    )
    category = models.ForeignKey(
        'categories.Category',
        on_delete=models.RESTRICT,
        related_name='time_entries',
        help_text="Category the time is tracked against"
    )
    start_time = models.DateTimeField(
        help_text="When the timer started"
    )
    end_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the timer stopped (empty while running)"
    )
    duration = models.PositiveIntegerField(
        default=0,
        help_text="Tracked seconds (0 until stopped)"
    )
    points = models.PositiveIntegerField(
        default=0,
        help_text="Points awarded (one per completed minute)"
    )
    description = models.TextField(
        blank=True,
        default='',
        help_text="Optional note about the session"
    )

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TimeEntryQuerySet.as_manager()

    class Meta:
        ordering = ['-start_time']
        constraints = [
            models.UniqueConstraint(
                fields=['user'],
                condition=Q(end_time__isnull=True),
                name='one_open_time_entry_per_user',
            ),
        ]
        indexes = [
            models.Index(fields=['user', '-start_time'], name='time_entrie_user_id_3f1c2a_idx'),
            models.Index(fields=['user', 'end_time'], name='time_entrie_user_id_8b7d41_idx'),
            models.Index(fields=['category'], name='time_entrie_categor_5e0a9c_idx'),
        ]
        verbose_name = 'Time Entry'
        verbose_name_plural = 'Time Entries'

    def __str__(self):
        end = self.end_time.strftime('%Y-%m-%d %H:%M') if self.end_time else 'running'
        return f"{self.category} {self.start_time.strftime('%Y-%m-%d %H:%M')} - {end}"

    @property
    def is_open(self):
        return self.end_time is None

    @property
    def duration_minutes(self):
        """Whole minutes tracked."""
        return self.duration // 60
