# apps/api/v1/serializers/users.py
from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from users.models import User


class CurrentUserSerializer(serializers.ModelSerializer):
    """Profile of the authenticated user, including role and supplier link."""
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'name', 'phone',
            'role', 'supplier', 'supplier_name',
            'is_superuser', 'is_staff',
        ]
        read_only_fields = fields


class ChangePasswordSerializer(serializers.Serializer):
    """Needs ``request`` in context; checks the current password and the password validators."""
    current_password = serializers.CharField(write_only=True, trim_whitespace=False)
    new_password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_current_password(self, value):
        if not self.context['request'].user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate_new_password(self, value):
        try:
            password_validation.validate_password(value, self.context['request'].user)
        except DjangoValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value
