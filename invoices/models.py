from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction


class Invoice(models.Model):
    INVOICE_STATUS = (
        ('draft', 'Draft'),
        ('sent', 'Sent'),
        ('paid', 'Paid'),
        ('overdue', 'Overdue'),
        ('cancelled', 'Cancelled'),
    )
    # retry budget when a concurrent writer took the same number
    NUMBER_ATTEMPTS = 3

    invoice_number = models.CharField(max_length=20, unique=True, blank=True)

    # denormalized from the rental unit at creation time
    property = models.ForeignKey(
        'properties.Property', on_delete=models.PROTECT, related_name='invoices')
    rental_unit = models.ForeignKey(
        'properties.RentalUnit', on_delete=models.PROTECT, related_name='invoices')
    tenant = models.ForeignKey(
        'tenants.Tenant', on_delete=models.PROTECT, related_name='invoices')

    invoice_date = models.DateField()
    due_date = models.DateField()
    period_start = models.DateField()
    period_end = models.DateField()

    subtotal = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'))
    currency = models.CharField(max_length=3, default='MVR')

    status = models.CharField(
        max_length=20, choices=INVOICE_STATUS, default='draft')
    is_auto_generated = models.BooleanField(default=False)
    # null means system generated
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='rent_invoices')

    notes = models.TextField(blank=True, null=True)
    paid_date = models.DateField(blank=True, null=True)
    email_sent = models.BooleanField(default=False)
    email_sent_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-invoice_date', '-invoice_number']
        constraints = [
            models.UniqueConstraint(
                fields=['rental_unit', 'period_start', 'period_end'],
                name='uniq_invoice_unit_period'),
        ]
        indexes = [
            models.Index(fields=['period_start', 'period_end'],
                         name='invoice_period_idx'),
        ]

    def __str__(self):
        return f"Invoice #{self.invoice_number} - {self.rental_unit_id}"

    def _generate_invoice_number(self, reconcile=False):
        from .numbering import next_invoice_number
        return next_invoice_number(self.period_start.year, self.period_start.month,
                                   reconcile=reconcile)

    def save(self, *args, **kwargs):
        if self.invoice_number or self.pk:
            return super().save(*args, **kwargs)

        # retry if a race causes a unique collision on the number
        for attempt in range(1, self.NUMBER_ATTEMPTS + 1):
            self.invoice_number = self._generate_invoice_number(reconcile=attempt > 1)
            try:
                with transaction.atomic():
                    return super().save(*args, **kwargs)
            except IntegrityError:
                taken = Invoice.objects.filter(
                    invoice_number=self.invoice_number).exists()
                self.invoice_number = ''
                if not taken or attempt == self.NUMBER_ATTEMPTS:
                    raise


class InvoiceItem(models.Model):
    invoice = models.ForeignKey(
        Invoice, on_delete=models.CASCADE, related_name='items')
    position = models.PositiveSmallIntegerField(default=0)
    description = models.CharField(max_length=200)
    amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'))
    quantity = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        ordering = ['invoice', 'position', 'id']

    def __str__(self):
        return f"{self.description} - {self.amount}"


class InvoiceSequence(models.Model):
    """Per year-month counter behind invoice numbers."""
    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField()
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['year', 'month'], name='uniq_invoice_sequence_month'),
        ]

    def __str__(self):
        return f"{self.year}-{self.month:02d}: {self.last_value}"
