from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class CategoryQuerySet(models.QuerySet):

    def defaults(self):
        return self.filter(is_default=True)

    def delete(self):
        """Bulk delete, refused when any selected category is a default."""
        if self.defaults().exists():
            raise ValidationError("Default categories cannot be deleted")
        return super().delete()


class Category(models.Model):
    """
    A user-owned bucket that time entries and goals are filed under.
    Default categories are created at signup and cannot be deleted.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='categories',
        help_text="Owner of this category"
    )
    name = models.CharField(
        max_length=100,
        help_text="Category name (unique per user)"
    )
    description = models.TextField(
        blank=True,
        default='',
        help_text="Optional description"
    )
    color = models.CharField(
        max_length=7,
        default='#3B82F6',
        help_text="Hex color used in charts (e.g., '#10B981')"
    )
    icon = models.CharField(
        max_length=50,
        blank=True,
        default='',
        help_text="Icon name shown next to the category (e.g., 'Code', 'BookOpen')"
    )
    is_default = models.BooleanField(
        default=False,
        help_text="Seeded at signup; default categories cannot be deleted"
    )

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CategoryQuerySet.as_manager()

    class Meta:
        ordering = ['-is_default', 'created_at', 'id']
        unique_together = ['user', 'name']
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name

    def delete(self, *args, **kwargs):
        if self.is_default:
            raise ValidationError("Default categories cannot be deleted")
        return super().delete(*args, **kwargs)
