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
            name='Achievement',
            fields=[
                ('achievement_id', models.CharField(help_text="Stable identifier, e.g. 'streak_beginner'", max_length=50, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('icon', models.CharField(blank=True, help_text='Icon name shown next to the badge', max_length=50)),
                ('category', models.CharField(choices=[('streak', 'Streak'), ('time', 'Time'), ('goal', 'Goal'), ('performance', 'Performance'), ('total', 'Total'), ('category', 'Category')], db_index=True, max_length=20)),
                ('rarity', models.CharField(choices=[('common', 'Common'), ('rare', 'Rare'), ('epic', 'Epic'), ('legendary', 'Legendary')], default='common', max_length=20)),
                ('points', models.PositiveIntegerField(default=0)),
                ('condition_type', models.CharField(help_text='Statistic the unlock condition is checked against', max_length=50)),
                ('condition_value', models.PositiveIntegerField(help_text='Threshold the statistic must reach')),
                ('time_range_start', models.PositiveSmallIntegerField(blank=True, help_text='Local start hour for time_range_work conditions', null=True)),
                ('time_range_end', models.PositiveSmallIntegerField(blank=True, help_text='Local end hour (exclusive) for time_range_work conditions', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Achievement',
                'verbose_name_plural': 'Achievements',
                'ordering': ['category', 'condition_value'],
            },
        ),
        migrations.CreateModel(
            name='UserAchievement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('achieved_at', models.DateTimeField(auto_now_add=True)),
                ('achievement', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='unlocks', to='achievements.achievement')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='achievements', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'User Achievement',
                'verbose_name_plural': 'User Achievements',
                'ordering': ['-achieved_at'],
                'unique_together': {('user', 'achievement')},
            },
        ),
    ]
