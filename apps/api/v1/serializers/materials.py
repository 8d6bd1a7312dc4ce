# apps/api/v1/serializers/materials.py
from rest_framework import serializers

from apps.materials.models import Material


class MaterialSerializer(serializers.ModelSerializer):
    """Standard serializer for Material model."""

    class Meta:
        model = Material
        fields = [
            'id', 'code', 'name', 'specification', 'unit', 'category',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']
