from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='GlobalSettings',
            fields=[
                ('id', models.PositiveSmallIntegerField(
                    default=1, editable=False, primary_key=True, serialize=False)),
                ('site_name', models.CharField(
                    default='Rental Management System', max_length=100)),
                ('default_currency', models.CharField(choices=[('MVR', 'Maldivian Rufiyaa'), (
                    'USD', 'US Dollar'), ('EUR', 'Euro')], default='MVR', max_length=3)),
                ('time_zone', models.CharField(
                    default='Indian/Maldives', max_length=64)),
                ('auto_generate_rent', models.BooleanField(default=False)),
                ('rent_generation_day', models.PositiveSmallIntegerField(
                    default=1,
                    help_text='Day of month the automatic rent run fires (09:00 local time).',
                    validators=[django.core.validators.MinValueValidator(1),
                                django.core.validators.MaxValueValidator(31)])),
                ('rent_due_days', models.PositiveSmallIntegerField(
                    default=7,
                    help_text='Days after the invoice date that rent falls due.',
                    validators=[django.core.validators.MinValueValidator(1),
                                django.core.validators.MaxValueValidator(31)])),
                ('include_utilities', models.BooleanField(default=False)),
                ('utilities_amount', models.DecimalField(
                    decimal_places=2, default=Decimal('0.00'), max_digits=10,
                    validators=[django.core.validators.MinValueValidator(0)])),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Global Settings',
                'verbose_name_plural': 'Global Settings',
            },
        ),
    ]
