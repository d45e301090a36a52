from django.contrib import admin, messages
from .models import Category


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'color', 'icon', 'is_default', 'created_at']
    list_filter = ['is_default', 'user']
    search_fields = ['name', 'description', 'user__username']
    readonly_fields = ['is_default', 'created_at', 'updated_at']

    fieldsets = (
        ('Category Information', {
            'fields': ('user', 'name', 'description', 'color', 'icon', 'is_default')
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_default:
            return False
        return super().has_delete_permission(request, obj)

    def delete_queryset(self, request, queryset):
        """Bulk action: skip default categories and delete the rest."""
        skipped = queryset.defaults().count()
        if skipped:
            self.message_user(
                request,
                f"Skipped {skipped} default categor{'y' if skipped == 1 else 'ies'}",
                messages.WARNING,
            )
        queryset.filter(is_default=False).delete()
