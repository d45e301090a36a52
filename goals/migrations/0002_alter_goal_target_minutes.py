import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('goals', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='goal',
            name='target_minutes',
            field=models.PositiveIntegerField(help_text='Target minutes per period (at most one full period)', validators=[django.core.validators.MinValueValidator(1)]),
        ),
    ]
