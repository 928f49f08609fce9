# invoices/services.py
"""
Monthly rent invoice generation.

One draft invoice per occupied rental unit per calendar month. Each unit is
processed in its own transaction: a failure on one unit is recorded and the
batch moves on, and invoices already written stay written.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone

from properties.models import RentalUnit

from .config import GenerationConfig
from .exceptions import BatchGenerationError, DataQualityError
from .models import Invoice, InvoiceItem
from .periods import Period, compute_due_date, compute_period

logger = logging.getLogger(__name__)

OCCUPIED = 'occupied'
UTILITIES_SUFFIX = ' (including utilities)'


# ---------- occupancy ----------

def list_occupied_units():
    """Every unit flagged occupied, tenant or not, with property and tenant joined."""
    return (RentalUnit.objects
            .filter(status=OCCUPIED)
            .select_related('property', 'tenant')
            .order_by('property__name', 'unit_number', 'pk'))


def list_billable_units():
    """Occupied units with a tenant assigned: the ones that get invoiced."""
    return list_occupied_units().filter(tenant__isnull=False)


def occupied_units_count() -> int:
    return list_billable_units().count()


def unit_label(unit) -> str:
    prop = getattr(unit, 'property', None)
    name = getattr(prop, 'name', None) or 'unknown property'
    return f"Unit {unit.unit_number} ({name})"


def check_unit_data(unit) -> None:
    if unit.tenant_id is None:
        raise DataQualityError(
            f"{unit_label(unit)} is marked occupied but has no tenant assigned")
    if unit.property_id is None:
        raise DataQualityError(f"{unit_label(unit)} has no property")
    if unit.rent_amount is None:
        raise DataQualityError(f"{unit_label(unit)} has no rent amount")
    if not unit.currency:
        raise DataQualityError(f"{unit_label(unit)} has no currency")


# ---------- duplicate guard ----------

def exists_for_period(rental_unit_id, period_start: date, period_end: date) -> bool:
    return Invoice.objects.filter(
        rental_unit_id=rental_unit_id,
        period_start=period_start,
        period_end=period_end,
    ).exists()


# ---------- line items ----------

@dataclass
class LineItem:
    description: str
    amount: Decimal
    quantity: int = 1
    unit_price: Decimal = Decimal('0.00')

    def as_dict(self) -> dict:
        return {
            'description': self.description,
            'amount': str(self.amount),
            'quantity': self.quantity,
            'unit_price': str(self.unit_price),
        }


def build_line_item(unit, include_utilities: bool = False,
                    utilities_amount: Decimal = Decimal('0.00')) -> LineItem:
    """
    Single rent line for a unit. Utilities are folded into the same line
    rather than added as a second one.
    """
    amount = Decimal(unit.rent_amount)
    description = f"Rent for {unit.unit_number}, Floor {unit.floor_number}"

    utilities = Decimal(utilities_amount or 0)
    if include_utilities and utilities > 0:
        description += UTILITIES_SUFFIX
        amount += utilities

    return LineItem(description=description, amount=amount,
                    quantity=1, unit_price=amount)


# ---------- batch ----------

@dataclass
class UnitError:
    unit_id: int
    unit: str
    message: str

    def __str__(self):
        return f"{self.unit}: {self.message}"

    def as_dict(self) -> dict:
        return {'unit_id': self.unit_id, 'unit': self.unit, 'message': self.message}


@dataclass
class BatchResult:
    period: Period | None = None
    invoices: list = field(default_factory=list)
    errors: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
    disabled: bool = False
    dry_run: bool = False

    @property
    def generated_count(self) -> int:
        return len(self.invoices)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def totals_by_currency(self) -> dict:
        totals = defaultdict(Decimal)
        for inv in self.invoices:
            totals[inv.currency] += inv.total
        return dict(totals)

    def as_dict(self) -> dict:
        return {
            'generated_count': self.generated_count,
            'invoices': [summarize_invoice(inv) for inv in self.invoices],
            'errors': [str(e) for e in self.errors],
            'skipped': list(self.skipped),
            'skipped_count': self.skipped_count,
            'disabled': self.disabled,
            'dry_run': self.dry_run,
            'period': {
                'start': self.period.start.isoformat(),
                'end': self.period.end.isoformat(),
            } if self.period else None,
        }


def summarize_invoice(invoice) -> dict:
    return {
        'id': invoice.pk,
        'invoice_number': invoice.invoice_number,
        'unit': invoice.rental_unit.unit_number,
        'property': invoice.property.name,
        'tenant': invoice.tenant.get_full_name(),
        'due_date': invoice.due_date.isoformat(),
        'total': str(invoice.total),
        'currency': invoice.currency,
    }


def _build_invoice(unit, item: LineItem, period: Period, invoice_date: date,
                   due_date: date, created_by=None, auto_generated=True) -> Invoice:
    return Invoice(
        property=unit.property,
        rental_unit=unit,
        tenant=unit.tenant,
        invoice_date=invoice_date,
        due_date=due_date,
        period_start=period.start,
        period_end=period.end,
        subtotal=item.amount,
        tax=Decimal('0.00'),
        total=item.amount,
        currency=unit.currency,
        status='draft',
        is_auto_generated=auto_generated,
        created_by=created_by,
    )


def generate_invoice_for_unit(unit, period: Period, invoice_date: date, due_date: date,
                              config: GenerationConfig, created_by=None,
                              auto_generated=True, dry_run=False):
    """
    Create the period's invoice for one unit.

    Returns the invoice, or None when the unit already has one for the period.
    """
    check_unit_data(unit)

    with transaction.atomic():
        if exists_for_period(unit.pk, period.start, period.end):
            return None

        item = build_line_item(
            unit, config.include_utilities, config.utilities_amount)
        invoice = _build_invoice(unit, item, period, invoice_date, due_date,
                                 created_by=created_by, auto_generated=auto_generated)
        if dry_run:
            return invoice

        invoice.save()
        InvoiceItem.objects.create(
            invoice=invoice,
            position=0,
            description=item.description,
            amount=item.amount,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
    return invoice


def run_monthly_generation(year: int, month: int, due_date_offset_days: int | None = None, *,
                           config: GenerationConfig | None = None,
                           invoice_date: date | None = None,
                           created_by=None, auto_generated=True,
                           dry_run=False) -> BatchResult:
    """
    Generate invoices for every occupied unit for ``year``/``month``.

    Units that already have an invoice for the period are skipped. Per-unit
    failures land in ``result.errors``; a failure of the loop itself raises
    ``BatchGenerationError`` carrying the partial result.
    """
    config = config or GenerationConfig.load()
    config.validate_billing()
    period = compute_period(year, month)
    invoice_date = invoice_date or timezone.localdate(timezone=config.tzinfo)
    offset = config.rent_due_days if due_date_offset_days is None else due_date_offset_days
    due_date = compute_due_date(invoice_date, offset)

    result = BatchResult(period=period, dry_run=dry_run)
    logger.info("Starting rent generation for %s (invoice date %s, due %s)",
                period.label, invoice_date, due_date)

    try:
        units = list(list_occupied_units())
        logger.info("Found %d occupied rental units", len(units))

        for unit in units:
            label = unit_label(unit)
            try:
                invoice = generate_invoice_for_unit(
                    unit, period, invoice_date, due_date, config,
                    created_by=created_by, auto_generated=auto_generated,
                    dry_run=dry_run)
            except DataQualityError as e:
                logger.warning("Skipping %s: %s", label, e)
                result.errors.append(UnitError(unit.pk, label, str(e)))
                continue
            except IntegrityError as e:
                # another writer inserted the same unit+period first
                if exists_for_period(unit.pk, period.start, period.end):
                    logger.info("Invoice already exists for %s", label)
                    result.skipped.append(label)
                else:
                    logger.error("Could not save invoice for %s: %s", label, e)
                    result.errors.append(UnitError(unit.pk, label, str(e)))
                continue
            except Exception as e:
                logger.exception("Error generating invoice for %s", label)
                result.errors.append(UnitError(unit.pk, label, str(e)))
                continue

            if invoice is None:
                logger.info("Invoice already exists for %s", label)
                result.skipped.append(label)
                continue

            result.invoices.append(invoice)
            logger.info("Generated invoice %s for %s - %s",
                        invoice.invoice_number or '(dry run)', label,
                        unit.tenant.get_full_name())
    except Exception as e:
        logger.exception("Rent generation for %s failed", period.label)
        raise BatchGenerationError(str(e), result=result) from e

    logger.info("Rent generation for %s completed: %d generated, %d skipped, %d errors",
                period.label, result.generated_count, result.skipped_count,
                len(result.errors))
    for currency, amount in result.totals_by_currency().items():
        logger.info("Total amount generated: %s %s", amount, currency)
    return result


def run_scheduled_generation(today: date | None = None, dry_run=False) -> BatchResult:
    """Automatic path: does nothing unless auto generation is switched on."""
    config = GenerationConfig.load()
    if not config.auto_generate_rent:
        logger.info("Auto rent generation is disabled in settings")
        return BatchResult(disabled=True, dry_run=dry_run)

    today = today or timezone.localdate(timezone=config.tzinfo)
    return run_monthly_generation(today.year, today.month,
                                  config=config, invoice_date=today, dry_run=dry_run)


def trigger_monthly_generation(today: date | None = None, created_by=None) -> BatchResult:
    """Manual path: same run as the scheduler, ignoring the on/off switch."""
    config = GenerationConfig.load()
    today = today or timezone.localdate(timezone=config.tzinfo)
    logger.info("Manual rent generation triggered")
    return run_monthly_generation(today.year, today.month, config=config,
                                  invoice_date=today, created_by=created_by)
