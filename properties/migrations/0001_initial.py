import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenants', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Property',
            fields=[
                ('id', models.BigAutoField(auto_created=True,
                 primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(
                    max_length=100, verbose_name='Property Name')),
                ('address', models.CharField(
                    blank=True, max_length=200, null=True)),
                ('city', models.CharField(blank=True, max_length=50, null=True)),
                ('description', models.CharField(
                    blank=True, max_length=1000, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'Properties',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='RentalUnit',
            fields=[
                ('id', models.BigAutoField(auto_created=True,
                 primary_key=True, serialize=False, verbose_name='ID')),
                ('unit_number', models.CharField(max_length=20)),
                ('floor_number', models.PositiveSmallIntegerField(
                    default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('rent_amount', models.DecimalField(decimal_places=2, max_digits=10,
                 validators=[django.core.validators.MinValueValidator(0)])),
                ('currency', models.CharField(choices=[('MVR', 'MVR'), ('USD', 'USD'), (
                    'EUR', 'EUR')], default='MVR', max_length=3)),
                ('status', models.CharField(choices=[('available', 'Available'), ('occupied', 'Occupied'), (
                    'maintenance', 'Maintenance'), ('renovation', 'Renovation')], db_index=True, default='available', max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('property', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE,
                 related_name='units', to='properties.property')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                 related_name='rental_units', to='tenants.tenant')),
            ],
            options={
                'ordering': ['property__name', 'unit_number'],
                'indexes': [models.Index(fields=['property', 'unit_number'], name='rentalunit_property_unit_idx')],
            },
        ),
    ]
