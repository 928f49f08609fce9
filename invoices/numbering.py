# invoices/numbering.py
"""
Invoice numbers look like ``INV-202506-001``: a year-month prefix and a
sequence that restarts every month.

The sequence lives in an ``InvoiceSequence`` row per year-month, locked with
``select_for_update`` so two batches cannot hand out the same value. Numbers
created by other paths are honoured by raising the counter to the highest
suffix already stored under the prefix, once when the counter row is created
and again after a collision.
"""
from __future__ import annotations

import logging

from django.db import transaction

from .models import Invoice, InvoiceSequence

logger = logging.getLogger(__name__)

PREFIX = 'INV'
SEQUENCE_WIDTH = 3


def invoice_prefix(year: int, month: int) -> str:
    return f"{PREFIX}-{int(year):04d}{int(month):02d}"


def format_invoice_number(year: int, month: int, sequence: int) -> str:
    return f"{invoice_prefix(year, month)}-{sequence:0{SEQUENCE_WIDTH}d}"


def parse_sequence(invoice_number: str) -> int | None:
    """Numeric suffix of an invoice number, or None if it has none."""
    try:
        return int(invoice_number.rsplit('-', 1)[1])
    except (IndexError, ValueError, AttributeError):
        return None


def max_existing_sequence(year: int, month: int) -> int:
    # compare parsed integers; "-099" sorts after "-100" as text once widths differ
    numbers = Invoice.objects.filter(
        invoice_number__startswith=f"{invoice_prefix(year, month)}-"
    ).values_list('invoice_number', flat=True)
    sequences = [s for s in (parse_sequence(n) for n in numbers) if s is not None]
    return max(sequences, default=0)


def next_invoice_number(year: int, month: int, reconcile: bool = False) -> str:
    """
    Allocate the next invoice number for ``year``/``month``.

    Stored numbers are scanned only when the counter row is first created or
    when ``reconcile`` is set after a collision; otherwise the counter alone
    decides. Call inside the transaction that inserts the invoice so the
    counter row stays locked until the row is written.
    """
    with transaction.atomic():
        counter, created = InvoiceSequence.objects.select_for_update().get_or_create(
            year=year, month=month)
        current = counter.last_value
        if created or reconcile:
            current = max(current, max_existing_sequence(year, month))
        counter.last_value = current + 1
        counter.save(update_fields=['last_value', 'updated_at'])

    number = format_invoice_number(year, month, counter.last_value)
    logger.debug("Allocated invoice number %s", number)
    return number
