from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Category name (unique per user)', max_length=100)),
                ('description', models.TextField(blank=True, default='', help_text='Optional description')),
                ('color', models.CharField(default='#3B82F6', help_text="Hex color used in charts (e.g., '#10B981')", max_length=7)),
                ('icon', models.CharField(blank=True, default='', help_text="Icon name shown next to the category (e.g., 'Code', 'BookOpen')", max_length=50)),
                ('is_default', models.BooleanField(default=False, help_text='Seeded at signup; default categories cannot be deleted')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(help_text='Owner of this category', on_delete=django.db.models.deletion.CASCADE, related_name='categories', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'ordering': ['-is_default', 'created_at', 'id'],
                'unique_together': {('user', 'name')},
            },
        ),
    ]
