# apps/api/v1/serializers/sourcing.py
"""
Serializers for inquiries (RFQs) and supplier quotations.
"""
from rest_framework import serializers

from apps.sourcing.models import Inquiry, Quotation


class InquirySerializer(serializers.ModelSerializer):
    """Standard serializer for Inquiry model."""
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    created_by_name = serializers.CharField(source='created_by.username', read_only=True, default='')

    class Meta:
        model = Inquiry
        fields = [
            'id', 'inquiry_number', 'title', 'description', 'deadline',
            'status', 'status_display', 'created_by', 'created_by_name',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class InquiryWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    deadline = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class QuotationSerializer(serializers.ModelSerializer):
    """Standard serializer for Quotation model."""
    inquiry_number = serializers.CharField(source='inquiry.inquiry_number', read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    material_name = serializers.CharField(source='material.name', read_only=True, default='')
    order_number = serializers.CharField(source='order.order_number', read_only=True, default=None)

    class Meta:
        model = Quotation
        fields = [
            'id', 'inquiry', 'inquiry_number', 'supplier', 'supplier_name',
            'material', 'material_name', 'quantity', 'unit_price',
            'delivery_days', 'valid_until', 'status', 'reject_reason',
            'order', 'order_number', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class QuotationSubmitSerializer(serializers.Serializer):
    unit_price = serializers.CharField()
    quantity = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    material = serializers.IntegerField(required=False, allow_null=True)
    delivery_days = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    valid_until = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')
