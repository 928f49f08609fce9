# invoices/serializers.py
from rest_framework import serializers

from .models import Invoice, InvoiceItem


class GenerateMonthlySerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=2020)
    due_date_offset = serializers.IntegerField(
        min_value=1, max_value=31, required=False, allow_null=True)


class InvoiceItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceItem
        fields = ["description", "amount", "quantity", "unit_price"]


class InvoiceSerializer(serializers.ModelSerializer):
    items = InvoiceItemSerializer(many=True, read_only=True)
    property_name = serializers.CharField(source="property.name", read_only=True)
    unit_number = serializers.CharField(source="rental_unit.unit_number", read_only=True)
    tenant_name = serializers.CharField(source="tenant.get_full_name", read_only=True)

    class Meta:
        model = Invoice
        fields = ["id", "invoice_number", "property", "property_name",
                  "rental_unit", "unit_number", "tenant", "tenant_name",
                  "invoice_date", "due_date", "period_start", "period_end",
                  "items", "subtotal", "tax", "total", "currency", "status",
                  "is_auto_generated", "created_by", "created_at"]
        read_only_fields = fields
