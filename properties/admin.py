from django.contrib import admin

from .models import Property, RentalUnit


class RentalUnitInline(admin.TabularInline):
    model = RentalUnit
    extra = 0
    fields = ('unit_number', 'floor_number', 'tenant',
              'rent_amount', 'currency', 'status')


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ('name', 'address', 'city')
    search_fields = ('name', 'address')
    inlines = [RentalUnitInline]


@admin.register(RentalUnit)
class RentalUnitAdmin(admin.ModelAdmin):
    list_display = ('unit_number', 'property', 'floor_number',
                    'tenant', 'rent_amount', 'currency', 'status')
    list_filter = ('status', 'currency', 'property')
    search_fields = ('unit_number', 'property__name',
                     'tenant__first_name', 'tenant__last_name')
    list_select_related = ('property', 'tenant')
