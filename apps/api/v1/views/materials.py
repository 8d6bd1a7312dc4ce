# apps/api/v1/views/materials.py
"""Material catalogue endpoints."""
import logging

from django.db.models import ProtectedError
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters, viewsets

from apps.api.permissions import ReadOnlyOrPurchasing
from apps.materials.models import Material
from shared.exceptions import ValidationFailed

from ..serializers import MaterialSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=['materials'], summary='List materials'),
    retrieve=extend_schema(tags=['materials'], summary='Get a material'),
    create=extend_schema(tags=['materials'], summary='Create a material'),
    update=extend_schema(tags=['materials'], summary='Update a material'),
    partial_update=extend_schema(tags=['materials'], summary='Partially update a material'),
    destroy=extend_schema(tags=['materials'], summary='Delete an unused material'),
)
class MaterialViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Material model.

    Everyone signed in can read the catalogue; purchasing staff maintain it.
    """
    serializer_class = MaterialSerializer
    lookup_value_regex = r'[0-9]+'
    permission_classes = [ReadOnlyOrPurchasing]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['category', 'unit']
    search_fields = ['code', 'name', 'specification']
    ordering_fields = ['code', 'name', 'created_at']
    ordering = ['code']

    def get_queryset(self):
        return Material.objects.all()

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise ValidationFailed(
                f"Material {instance.code} is used by orders or quotations and cannot be deleted."
            ) from None
        logger.info(f"Material {instance.code} deleted by {self.request.user}")
