import math

from django.db import models


class Setting(models.Model):
    """
    Stores application-wide settings as key-value pairs.
    Lets timer policy values be tuned without a deploy.
    """
    key = models.CharField(
        max_length=255,
        unique=True,
        primary_key=True,
        help_text="Unique identifier for this setting"
    )
    value = models.TextField(
        help_text="Value for this setting"
    )
    description = models.TextField(
        blank=True,
        help_text="Human-readable description of what this setting controls"
    )

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['key']
        verbose_name = 'Setting'
        verbose_name_plural = 'Settings'

    def __str__(self):
        return f"{self.key}: {self.value[:50]}"

    @classmethod
    def get(cls, key, default=None):
        """
        Get a setting value by key. Returns default if not found.

        Usage:
            hours = Setting.get('timer_stale_threshold_hours', '24')
        """
        try:
            return cls.objects.get(pk=key).value
        except cls.DoesNotExist:
            return default

    @classmethod
    def get_number(cls, key, default, cast=float):
        """
        Get a numeric setting, falling back to default when the stored
        value is missing or not a finite number.
        """
        raw = cls.get(key)
        if raw is None:
            return default
        try:
            value = cast(raw.strip())
        except (TypeError, ValueError):
            return default
        if not math.isfinite(value):
            return default
        return value

    @classmethod
    def set(cls, key, value, description=''):
        """
        Set a setting value. Creates if doesn't exist, updates if it does.

        Usage:
            Setting.set('timer_stale_duration_cap_seconds', '14400',
                        'Max seconds credited to an auto-closed timer')
        """
        obj, created = cls.objects.update_or_create(
            key=key,
            defaults={'value': str(value), 'description': description}
        )
        return obj
