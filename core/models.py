# core/models.py
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class GlobalSettings(models.Model):
    CURRENCY_CHOICES = (
        ('MVR', 'Maldivian Rufiyaa'),
        ('USD', 'US Dollar'),
        ('EUR', 'Euro'),
    )

    id = models.PositiveSmallIntegerField(
        primary_key=True, default=1, editable=False)

    # Branding
    site_name = models.CharField(
        max_length=100, default="Rental Management System")

    # Billing
    default_currency = models.CharField(
        max_length=3, choices=CURRENCY_CHOICES, default="MVR")
    time_zone = models.CharField(max_length=64, default="Indian/Maldives")

    # Rent generation
    auto_generate_rent = models.BooleanField(default=False)
    rent_generation_day = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(31)],
        help_text="Day of month the automatic rent run fires (09:00 local time).")
    rent_due_days = models.PositiveSmallIntegerField(
        default=7,
        validators=[MinValueValidator(1), MaxValueValidator(31)],
        help_text="Days after the invoice date that rent falls due.")
    include_utilities = models.BooleanField(default=False)
    utilities_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(0)])

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Global Settings"
        verbose_name_plural = "Global Settings"

    def __str__(self):
        return "Global Settings"

    @classmethod
    def get_solo(cls):
        obj, _ = cls.objects.get_or_create(pk=1)
        return obj
