# invoices/apps.py
from django.apps import AppConfig
from django.conf import settings


class InvoicesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'invoices'

    def ready(self):
        # the rent job lives in-process; only processes that opt in run it
        if getattr(settings, 'RENT_SCHEDULER_AUTOSTART', False):
            from .scheduler import scheduler
            scheduler.start()
