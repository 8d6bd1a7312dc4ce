# apps/api/v1/serializers/orders.py
"""
Serializers for purchase orders and their status log.

Input serializers only check shape. Amounts travel as strings so
OrderService.parse_amount sees exactly what the client sent.
"""
from rest_framework import serializers

from apps.orders.models import Order, OrderLog


class OrderLogSerializer(serializers.ModelSerializer):
    """One timeline entry."""
    operator_name = serializers.SerializerMethodField()

    class Meta:
        model = OrderLog
        fields = [
            'id', 'action', 'old_status', 'new_status',
            'operator', 'operator_name', 'remark', 'created_at',
        ]
        read_only_fields = fields

    def get_operator_name(self, obj):
        if obj.operator is None:
            return ''
        return obj.operator.name or obj.operator.username


class OrderSerializer(serializers.ModelSerializer):
    """Standard serializer for Order model."""
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    material_code = serializers.CharField(source='material.code', read_only=True)
    material_name = serializers.CharField(source='material.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    allowed_actions = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'supplier', 'supplier_name',
            'material', 'material_code', 'material_name',
            'quantity', 'unit_price', 'total_amount', 'delivery_date',
            'status', 'status_display', 'allowed_actions', 'tracking_no', 'notes',
            'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OrderDetailSerializer(OrderSerializer):
    """Order with its timeline (set by OrderService.get_order)."""
    timeline = OrderLogSerializer(many=True, read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['timeline']
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    supplier = serializers.IntegerField()
    material = serializers.IntegerField()
    quantity = serializers.CharField()
    unit_price = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    delivery_date = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderUpdateSerializer(serializers.Serializer):
    quantity = serializers.CharField(required=False)
    unit_price = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    delivery_date = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class ShipOrderSerializer(serializers.Serializer):
    tracking_no = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class OrderListQuerySerializer(serializers.Serializer):
    """Query parameters accepted by GET /orders/."""
    status = serializers.CharField(required=False)
    supplier_id = serializers.IntegerField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    search = serializers.CharField(required=False)
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    page_size = serializers.IntegerField(required=False, min_value=1, max_value=100, default=20)
