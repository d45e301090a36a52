from django.contrib import admin
from .models import TimeEntry


@admin.register(TimeEntry)
class TimeEntryAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'category', 'start_time', 'end_time', 'duration_display', 'points', 'created_at']
    list_filter = ['category', 'user', 'start_time']
    search_fields = ['description', 'category__name', 'user__username']
    readonly_fields = ['created_at', 'updated_at', 'duration_display']
    date_hierarchy = 'start_time'

    fieldsets = (
        ('Time Entry Information', {
            'fields': ('user', 'category', 'start_time', 'end_time', 'duration_display', 'description')
        }),
        ('Accounting', {
            'fields': ('duration', 'points')
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def duration_display(self, obj):
        """Display duration in a human-readable format."""
        if obj.end_time is None:
            return "In Progress"
        hours = obj.duration // 3600
        minutes = (obj.duration % 3600) // 60
        return f"{hours}h {minutes}m"
    duration_display.short_description = 'Duration'
