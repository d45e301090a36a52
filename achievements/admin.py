from django.contrib import admin
from .models import Achievement, UserAchievement


@admin.register(Achievement)
class AchievementAdmin(admin.ModelAdmin):
    list_display = ['achievement_id', 'name', 'category', 'rarity', 'points', 'condition_type', 'condition_value', 'unlock_count']
    list_filter = ['category', 'rarity', 'condition_type']
    search_fields = ['achievement_id', 'name', 'description']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Badge', {
            'fields': ('achievement_id', 'name', 'description', 'icon', 'category', 'rarity', 'points')
        }),
        ('Unlock Condition', {
            'fields': ('condition_type', 'condition_value', 'time_range_start', 'time_range_end')
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def unlock_count(self, obj):
        return obj.unlocks.count()
    unlock_count.short_description = 'Unlocked by'


@admin.register(UserAchievement)
class UserAchievementAdmin(admin.ModelAdmin):
    list_display = ['user', 'achievement', 'achieved_at']
    list_filter = ['achievement__category', 'achievement__rarity']
    search_fields = ['user__username', 'achievement__name']
    readonly_fields = ['achieved_at']
    date_hierarchy = 'achieved_at'
