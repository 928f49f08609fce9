from decimal import Decimal

from django.test import TestCase, override_settings

from core.models import GlobalSettings
from invoices.config import GenerationConfig
from invoices.exceptions import ConfigurationError


class GenerationConfigTests(TestCase):
    def test_defaults_from_fresh_settings(self):
        config = GenerationConfig.load()
        self.assertFalse(config.auto_generate_rent)
        self.assertEqual(config.rent_generation_day, 1)
        self.assertEqual(config.rent_due_days, 7)
        self.assertEqual(config.time_zone, 'Indian/Maldives')

    @override_settings(RENT_SCHEDULER_HOUR=6)
    def test_load_reads_stored_settings(self):
        GlobalSettings.objects.update_or_create(pk=1, defaults={
            'auto_generate_rent': True,
            'rent_generation_day': 25,
            'rent_due_days': 14,
            'include_utilities': True,
            'utilities_amount': Decimal('120.00'),
        })
        config = GenerationConfig.load()
        self.assertTrue(config.auto_generate_rent)
        self.assertEqual(config.rent_generation_day, 25)
        self.assertEqual(config.rent_due_days, 14)
        self.assertEqual(config.utilities_amount, Decimal('120.00'))
        self.assertEqual(config.run_hour, 6)

    def test_schedule_validation(self):
        GenerationConfig(rent_generation_day=31).validate_schedule()
        for bad in (GenerationConfig(rent_generation_day=0),
                    GenerationConfig(rent_generation_day=32),
                    GenerationConfig(run_hour=24),
                    GenerationConfig(time_zone='Nowhere/Special')):
            with self.assertRaises(ConfigurationError):
                bad.validate_schedule()

    def test_negative_utilities_rejected(self):
        with self.assertRaises(ConfigurationError):
            GenerationConfig(utilities_amount=Decimal('-1')).validate_billing()
