# invoices/config.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings

from .exceptions import ConfigurationError
from .periods import DEFAULT_DUE_DAYS


@dataclass(frozen=True)
class GenerationConfig:
    """Rent settings read once at the start of a run and passed along."""
    auto_generate_rent: bool = False
    rent_generation_day: int = 1
    rent_due_days: int = DEFAULT_DUE_DAYS
    include_utilities: bool = False
    utilities_amount: Decimal = Decimal('0.00')
    time_zone: str = 'Indian/Maldives'
    run_hour: int = 9

    @classmethod
    def load(cls) -> 'GenerationConfig':
        from core.models import GlobalSettings

        gs = GlobalSettings.get_solo()
        return cls(
            auto_generate_rent=gs.auto_generate_rent,
            rent_generation_day=gs.rent_generation_day,
            rent_due_days=gs.rent_due_days,
            include_utilities=gs.include_utilities,
            utilities_amount=Decimal(gs.utilities_amount or 0),
            time_zone=gs.time_zone or settings.TIME_ZONE,
            run_hour=getattr(settings, 'RENT_SCHEDULER_HOUR', 9),
        )

    @property
    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown time zone {self.time_zone!r}") from e

    def validate_schedule(self) -> None:
        day = self.rent_generation_day
        if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 31:
            raise ConfigurationError(
                f"Rent generation day must be 1..31, got {day!r}")
        if not 0 <= self.run_hour <= 23:
            raise ConfigurationError(
                f"Rent generation hour must be 0..23, got {self.run_hour!r}")
        self.tzinfo  # raises ConfigurationError for an unknown zone

    def validate_billing(self) -> None:
        if self.utilities_amount < 0:
            raise ConfigurationError("Utilities amount cannot be negative")

    def as_dict(self) -> dict:
        return {
            'auto_generate_rent': self.auto_generate_rent,
            'rent_generation_day': self.rent_generation_day,
            'rent_due_days': self.rent_due_days,
            'include_utilities': self.include_utilities,
            'utilities_amount': str(self.utilities_amount),
            'time_zone': self.time_zone,
        }
