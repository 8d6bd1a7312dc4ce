# apps/api/v1/serializers/suppliers.py
"""
Serializers for suppliers.

Writes are shape-checked here and validated by SupplierService
(unique name, rating range).
"""
from rest_framework import serializers

from apps.suppliers.models import Supplier


class SupplierSerializer(serializers.ModelSerializer):
    """Standard serializer for Supplier model."""
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'contact_name', 'contact_phone', 'address',
            'status', 'status_display', 'rating',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class SupplierDetailSerializer(SupplierSerializer):
    """Supplier with order statistics (passed in as context['stats'])."""
    stats = serializers.SerializerMethodField()

    class Meta(SupplierSerializer.Meta):
        fields = SupplierSerializer.Meta.fields + ['stats']
        read_only_fields = fields

    def get_stats(self, obj):
        return self.context.get('stats')


class SupplierWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    contact_name = serializers.CharField(max_length=50, required=False, allow_blank=True)
    contact_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)


class SupplierRatingSerializer(serializers.Serializer):
    rating = serializers.CharField()
