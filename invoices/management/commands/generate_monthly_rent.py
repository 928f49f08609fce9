"""
Generate monthly rent invoices for all occupied rental units.

Usage:
    python manage.py generate_monthly_rent                    # current month
    python manage.py generate_monthly_rent --month 6 --year 2025
    python manage.py generate_monthly_rent --scheduled        # honour auto-generate switch
    python manage.py generate_monthly_rent --dry-run
"""
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from invoices.config import GenerationConfig
from invoices.exceptions import BatchGenerationError, ConfigurationError
from invoices.services import run_monthly_generation, run_scheduled_generation


class Command(BaseCommand):
    help = 'Generates monthly rent invoices for all occupied rental units'

    def add_arguments(self, parser):
        parser.add_argument('--month', type=int, help='Month to bill (1-12), default current')
        parser.add_argument('--year', type=int, help='Year to bill, default current')
        parser.add_argument('--due-days', type=int, dest='due_days',
                            help='Days after the invoice date that rent falls due')
        parser.add_argument('--scheduled', action='store_true',
                            help='Behave like the scheduled job: skip unless auto generation is on')
        parser.add_argument('--dry-run', action='store_true', dest='dry_run',
                            help='Show what would be created without creating invoices')

    def handle(self, *args, **options):
        month, year, due_days = options['month'], options['year'], options['due_days']
        if options['scheduled'] and (month, year, due_days) != (None, None, None):
            raise CommandError(
                "--scheduled bills the current month with the configured due days; "
                "it cannot be combined with --month, --year or --due-days")

        try:
            if options['scheduled']:
                result = run_scheduled_generation(dry_run=options['dry_run'])
            else:
                today = timezone.localdate(timezone=GenerationConfig.load().tzinfo)
                result = run_monthly_generation(
                    today.year if year is None else year,
                    today.month if month is None else month,
                    due_days, dry_run=options['dry_run'])
        except (ConfigurationError, ValueError) as e:
            raise CommandError(str(e))
        except BatchGenerationError as e:
            if e.result is not None:
                self._report(e.result)
            raise CommandError(f"Rent generation failed: {e}")

        self._report(result)

    def _report(self, result):
        if result.disabled:
            self.stdout.write(self.style.WARNING(
                'Auto rent generation is disabled in settings. Nothing generated.'))
            return

        verb = 'Would create' if result.dry_run else 'Created'
        for inv in result.invoices:
            self.stdout.write(
                f"  + {inv.rental_unit} - {inv.tenant} - {inv.currency} {inv.total}"
                f" {inv.invoice_number}".rstrip())
        for label in result.skipped:
            self.stdout.write(f"  = {label} - already invoiced")
        for err in result.errors:
            self.stdout.write(self.style.ERROR(f"  ! {err}"))

        self.stdout.write(self.style.SUCCESS(
            f"{verb} {result.generated_count} invoices for {result.period.label}, "
            f"skipped {result.skipped_count}, errors {len(result.errors)}."))
