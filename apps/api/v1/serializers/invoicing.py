# apps/api/v1/serializers/invoicing.py
"""
Serializers for supplier reconciliations and invoices.
"""
from rest_framework import serializers

from apps.invoicing.models import Invoice, Reconciliation

from .orders import OrderSerializer


class ReconciliationSerializer(serializers.ModelSerializer):
    """Standard serializer for Reconciliation model."""
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Reconciliation
        fields = [
            'id', 'reconciliation_number', 'supplier', 'supplier_name',
            'period_start', 'period_end', 'total_amount',
            'status', 'status_display', 'created_by',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class InvoiceSerializer(serializers.ModelSerializer):
    """Standard serializer for Invoice model."""
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    reconciliation_number = serializers.CharField(
        source='reconciliation.reconciliation_number', read_only=True, default=None,
    )

    class Meta:
        model = Invoice
        fields = [
            'id', 'supplier', 'supplier_name', 'reconciliation', 'reconciliation_number',
            'invoice_no', 'invoice_date', 'amount', 'tax_amount', 'image_url',
            'status', 'reject_reason', 'uploaded_by',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ReconciliationDetailSerializer(serializers.Serializer):
    """Renders a ReconciliationDetail: the header, its orders and invoices."""
    reconciliation = ReconciliationSerializer(read_only=True)
    orders = OrderSerializer(many=True, read_only=True)
    invoices = InvoiceSerializer(many=True, read_only=True)


class ReconciliationCreateSerializer(serializers.Serializer):
    supplier = serializers.IntegerField()
    period_start = serializers.CharField()
    period_end = serializers.CharField()


class InvoiceUploadSerializer(serializers.Serializer):
    invoice_no = serializers.CharField(max_length=50)
    amount = serializers.CharField()
    invoice_date = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    tax_amount = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    image_url = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class InvoiceLinkSerializer(serializers.Serializer):
    reconciliation = serializers.IntegerField()
