# core/admin.py
from django.contrib import admin

from .models import GlobalSettings


@admin.register(GlobalSettings)
class GlobalSettingsAdmin(admin.ModelAdmin):
    fieldsets = (
        ("Branding", {"fields": ("site_name",)}),
        ("Billing", {"fields": ("default_currency", "time_zone")}),
        ("Rent generation", {"fields": (
            "auto_generate_rent", "rent_generation_day", "rent_due_days",
            "include_utilities", "utilities_amount")}),
    )

    def has_add_permission(self, request):
        # Enforce singleton
        return not GlobalSettings.objects.exists()
