from django.test import TestCase

from core.models import GlobalSettings


class GlobalSettingsTests(TestCase):
    def test_get_solo_is_a_singleton(self):
        first = GlobalSettings.get_solo()
        first.rent_due_days = 10
        first.save()

        self.assertEqual(GlobalSettings.get_solo().pk, 1)
        self.assertEqual(GlobalSettings.get_solo().rent_due_days, 10)
        self.assertEqual(GlobalSettings.objects.count(), 1)
