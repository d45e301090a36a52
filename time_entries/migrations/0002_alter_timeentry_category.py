import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('categories', '0001_initial'),
        ('time_entries', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='timeentry',
            name='category',
            field=models.ForeignKey(help_text='Category the time is tracked against', on_delete=django.db.models.deletion.RESTRICT, related_name='time_entries', to='categories.category'),
        ),
    ]
