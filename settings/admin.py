from django.contrib import admin
from .models import Setting
from .policy import STALE_CAP_KEY, STALE_THRESHOLD_KEY, STREAK_LOOKBACK_KEY

TIMER_POLICY_KEYS = {STALE_THRESHOLD_KEY, STALE_CAP_KEY, STREAK_LOOKBACK_KEY}


@admin.register(Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'value_preview', 'is_timer_policy', 'updated_at']
    search_fields = ['key', 'value', 'description']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Setting Information', {
            'fields': ('key', 'value', 'description'),
            'description': (
                'Timer policy keys: timer_stale_threshold_hours, '
                'timer_stale_duration_cap_seconds, streak_lookback_days'
            ),
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def value_preview(self, obj):
        """Show a preview of the value (truncated if long)"""
        if len(obj.value) > 50:
            return f"{obj.value[:50]}..."
        return obj.value
    value_preview.short_description = 'Value'

    def is_timer_policy(self, obj):
        return obj.key in TIMER_POLICY_KEYS
    is_timer_policy.boolean = True
    is_timer_policy.short_description = 'Timer policy'
