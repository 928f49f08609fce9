from django.core.validators import MinValueValidator
from django.db import models


class Property(models.Model):
    name = models.CharField(max_length=100, verbose_name='Property Name')
    address = models.CharField(max_length=200, blank=True, null=True)
    city = models.CharField(max_length=50, blank=True, null=True)
    description = models.CharField(max_length=1000, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def full_address(self):
        parts = [p for p in (self.address, self.city) if p and p.strip()]
        return ", ".join(parts)

    class Meta:
        ordering = ['name']
        verbose_name_plural = "Properties"


class RentalUnit(models.Model):
    UNIT_STATUS = [
        ('available', 'Available'),
        ('occupied', 'Occupied'),
        ('maintenance', 'Maintenance'),
        ('renovation', 'Renovation'),
    ]
    CURRENCY_CHOICES = [
        ('MVR', 'MVR'),
        ('USD', 'USD'),
        ('EUR', 'EUR'),
    ]

    property = models.ForeignKey(
        'Property', on_delete=models.CASCADE, related_name='units')
    # null means the unit has no tenant assigned
    tenant = models.ForeignKey(
        'tenants.Tenant', on_delete=models.SET_NULL, null=True, blank=True,
        related_name='rental_units')
    unit_number = models.CharField(max_length=20)
    floor_number = models.PositiveSmallIntegerField(
        default=1, validators=[MinValueValidator(1)])
    rent_amount = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    currency = models.CharField(
        max_length=3, choices=CURRENCY_CHOICES, default='MVR')
    status = models.CharField(
        max_length=20, choices=UNIT_STATUS, default='available', db_index=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['property__name', 'unit_number']
        indexes = [
            models.Index(fields=['property', 'unit_number'],
                         name='rentalunit_property_unit_idx'),
        ]

    def __str__(self):
        return f"{self.property.name}-{self.unit_number}"

    def display_name(self):
        return f"Unit {self.unit_number} - Floor {self.floor_number}"
