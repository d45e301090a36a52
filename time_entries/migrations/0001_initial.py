from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('categories', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='TimeEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('start_time', models.DateTimeField(help_text='When the timer started')),
                ('end_time', models.DateTimeField(blank=True, help_text='When the timer stopped (empty while running)', null=True)),
                ('duration', models.PositiveIntegerField(default=0, help_text='Tracked seconds (0 until stopped)')),
                ('points', models.PositiveIntegerField(default=0, help_text='Points awarded (one per completed minute)')),
                ('description', models.TextField(blank=True, default='', help_text='Optional note about the session')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(help_text='Category the time is tracked against', on_delete=django.db.models.deletion.PROTECT, related_name='time_entries', to='categories.category')),
                ('user', models.ForeignKey(help_text='Owner of this time entry', on_delete=django.db.models.deletion.CASCADE, related_name='time_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Time Entry',
                'verbose_name_plural': 'Time Entries',
                'ordering': ['-start_time'],
            },
        ),
        migrations.AddIndex(
            model_name='timeentry',
            index=models.Index(fields=['user', '-start_time'], name='time_entrie_user_id_3f1c2a_idx'),
        ),
        migrations.AddIndex(
            model_name='timeentry',
            index=models.Index(fields=['user', 'end_time'], name='time_entrie_user_id_8b7d41_idx'),
        ),
        migrations.AddIndex(
            model_name='timeentry',
            index=models.Index(fields=['category'], name='time_entrie_categor_5e0a9c_idx'),
        ),
        migrations.AddConstraint(
            model_name='timeentry',
            constraint=models.UniqueConstraint(condition=models.Q(('end_time__isnull', True)), fields=('user',), name='one_open_time_entry_per_user'),
        ),
    ]
