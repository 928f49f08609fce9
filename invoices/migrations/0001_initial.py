from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('properties', '0001_initial'),
        ('tenants', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='InvoiceSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True,
                 primary_key=True, serialize=False, verbose_name='ID')),
                ('year', models.PositiveSmallIntegerField()),
                ('month', models.PositiveSmallIntegerField()),
                ('last_value', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('year', 'month'), name='uniq_invoice_sequence_month')],
            },
        ),
        migrations.CreateModel(
            name='Invoice',
            fields=[
                ('id', models.BigAutoField(auto_created=True,
                 primary_key=True, serialize=False, verbose_name='ID')),
                ('invoice_number', models.CharField(
                    blank=True, max_length=20, unique=True)),
                ('invoice_date', models.DateField()),
                ('due_date', models.DateField()),
                ('period_start', models.DateField()),
                ('period_end', models.DateField()),
                ('subtotal', models.DecimalField(decimal_places=2,
                 default=Decimal('0.00'), max_digits=12)),
                ('tax', models.DecimalField(decimal_places=2,
                 default=Decimal('0.00'), max_digits=12)),
                ('total', models.DecimalField(decimal_places=2,
                 default=Decimal('0.00'), max_digits=12)),
                ('currency', models.CharField(default='MVR', max_length=3)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('sent', 'Sent'), ('paid', 'Paid'), (
                    'overdue', 'Overdue'), ('cancelled', 'Cancelled')], default='draft', max_length=20)),
                ('is_auto_generated', models.BooleanField(default=False)),
                ('notes', models.TextField(blank=True, null=True)),
                ('paid_date', models.DateField(blank=True, null=True)),
                ('email_sent', models.BooleanField(default=False)),
                ('email_sent_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                 related_name='rent_invoices', to=settings.AUTH_USER_MODEL)),
                ('property', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                 related_name='invoices', to='properties.property')),
                ('rental_unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                 related_name='invoices', to='properties.rentalunit')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                 related_name='invoices', to='tenants.tenant')),
            ],
            options={
                'ordering': ['-invoice_date', '-invoice_number'],
                'constraints': [models.UniqueConstraint(fields=('rental_unit', 'period_start', 'period_end'), name='uniq_invoice_unit_period')],
                'indexes': [models.Index(fields=['period_start', 'period_end'], name='invoice_period_idx')],
            },
        ),
        migrations.CreateModel(
            name='InvoiceItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True,
                 primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveSmallIntegerField(default=0)),
                ('description', models.CharField(max_length=200)),
                ('amount', models.DecimalField(decimal_places=2,
                 default=Decimal('0.00'), max_digits=12)),
                ('quantity', models.PositiveIntegerField(
                    default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('unit_price', models.DecimalField(decimal_places=2,
                 default=Decimal('0.00'), max_digits=12)),
                ('invoice', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE,
                 related_name='items', to='invoices.invoice')),
            ],
            options={
                'ordering': ['invoice', 'position', 'id'],
            },
        ),
    ]
