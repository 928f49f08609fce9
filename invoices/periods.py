# invoices/periods.py
from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta

from .exceptions import ConfigurationError

DEFAULT_DUE_DAYS = 7


@dataclass(frozen=True)
class Period:
    start: date
    end: date

    @property
    def label(self) -> str:
        return self.start.strftime('%B %Y')


def first_of_month(d: date) -> date:
    return date(d.year, d.month, 1)


def last_of_month(d: date) -> date:
    return date(d.year, d.month, monthrange(d.year, d.month)[1])


def compute_period(year: int, month: int) -> Period:
    """First and last calendar day of ``year``/``month``."""
    if not 1 <= int(month) <= 12:
        raise ValueError(f"month must be 1..12, got {month}")
    start = date(int(year), int(month), 1)
    return Period(start=start, end=last_of_month(start))


def validate_due_days(offset_days) -> int:
    if isinstance(offset_days, bool) or not isinstance(offset_days, int) or offset_days <= 0:
        raise ConfigurationError(
            f"Due-date offset must be a positive number of days, got {offset_days!r}")
    return offset_days


def compute_due_date(invoice_date: date, offset_days: int = DEFAULT_DUE_DAYS) -> date:
    return invoice_date + timedelta(days=validate_due_days(offset_days))
