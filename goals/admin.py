from django.contrib import admin
from .models import Goal


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ["category", "user", "target_minutes", "period", "is_active", "updated_at"]
    list_filter = ["period", "is_active"]
    search_fields = ["category__name", "user__username"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = (
        ("Goal Information", {"fields": ("user", "category", "target_minutes", "period", "is_active")}),
        ("Audit Information", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )
