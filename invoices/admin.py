from django.contrib import admin

from .models import Invoice, InvoiceItem, InvoiceSequence


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ('invoice_number', 'rental_unit', 'tenant', 'invoice_date',
                    'due_date', 'status', 'total', 'currency', 'is_auto_generated')
    list_filter = ('status', 'is_auto_generated', 'currency', 'invoice_date')
    search_fields = ('invoice_number', 'rental_unit__unit_number',
                     'tenant__first_name', 'tenant__last_name', 'property__name')
    list_select_related = ('rental_unit', 'tenant', 'property')
    inlines = [InvoiceItemInline]
    date_hierarchy = 'invoice_date'


@admin.register(InvoiceItem)
class InvoiceItemAdmin(admin.ModelAdmin):
    list_display = ('invoice', 'description', 'quantity', 'unit_price', 'amount')


@admin.register(InvoiceSequence)
class InvoiceSequenceAdmin(admin.ModelAdmin):
    list_display = ('year', 'month', 'last_value', 'updated_at')
    ordering = ('-year', '-month')
