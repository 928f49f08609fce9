from io import StringIO
from unittest import mock

from django.core.management import CommandError, call_command
from django.test import TestCase

from core.models import GlobalSettings
from invoices.models import Invoice

from .factories import make_property, make_unit


class GenerateMonthlyRentCommandTests(TestCase):
    def run_command(self, **options):
        out = StringIO()
        call_command('generate_monthly_rent', stdout=out, **options)
        return out.getvalue()

    def test_generates_for_month(self):
        make_unit()
        output = self.run_command(month=6, year=2025)
        self.assertIn('Created 1 invoices for June 2025', output)
        self.assertEqual(Invoice.objects.get().invoice_number, 'INV-202506-001')

    def test_dry_run(self):
        make_unit()
        output = self.run_command(month=6, year=2025, dry_run=True)
        self.assertIn('Would create 1 invoices', output)
        self.assertEqual(Invoice.objects.count(), 0)

    def test_reports_skips_and_errors(self):
        prop = make_property()
        make_unit(prop, 'A1')
        make_unit(prop, 'A2', tenant=None)
        self.run_command(month=6, year=2025)
        output = self.run_command(month=6, year=2025)
        self.assertIn('already invoiced', output)
        self.assertIn('skipped 1, errors 1', output)

    def test_due_days(self):
        make_unit()
        self.run_command(month=6, year=2025, due_days=10)
        invoice = Invoice.objects.get()
        self.assertEqual((invoice.due_date - invoice.invoice_date).days, 10)

    def test_bad_month(self):
        with self.assertRaises(CommandError):
            self.run_command(month=13, year=2025)

    def test_bad_due_days(self):
        with self.assertRaises(CommandError):
            self.run_command(month=6, year=2025, due_days=0)

    def test_scheduled_respects_switch(self):
        make_unit()
        output = self.run_command(scheduled=True)
        self.assertIn('disabled', output)
        self.assertEqual(Invoice.objects.count(), 0)

        GlobalSettings.objects.update_or_create(pk=1, defaults={'auto_generate_rent': True})
        self.run_command(scheduled=True)
        self.assertEqual(Invoice.objects.count(), 1)

    def test_batch_failure(self):
        with mock.patch('invoices.services.list_occupied_units',
                        side_effect=RuntimeError('db down')):
            with self.assertRaisesMessage(CommandError, 'db down'):
                self.run_command(month=6, year=2025)

    def test_scheduled_dry_run_writes_nothing(self):
        GlobalSettings.objects.update_or_create(pk=1, defaults={'auto_generate_rent': True})
        make_unit()
        output = self.run_command(scheduled=True, dry_run=True)
        self.assertIn('Would create 1 invoices', output)
        self.assertEqual(Invoice.objects.count(), 0)

    def test_scheduled_rejects_explicit_period(self):
        make_unit()
        for options in ({'month': 6}, {'year': 2025}, {'due_days': 10}):
            with self.subTest(**options):
                with self.assertRaisesMessage(CommandError, 'cannot be combined'):
                    self.run_command(scheduled=True, **options)
        self.assertEqual(Invoice.objects.count(), 0)
