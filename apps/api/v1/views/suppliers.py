# apps/api/v1/views/suppliers.py
"""
Supplier registry endpoints.

GET    /suppliers/               list (filter: status; search: name, contact)
POST   /suppliers/               create
GET    /suppliers/{id}/          detail with order statistics
PATCH  /suppliers/{id}/          edit contact details
POST   /suppliers/{id}/block/
POST   /suppliers/{id}/activate/
POST   /suppliers/{id}/rating/   { "rating": 4.5 }
"""
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.api.permissions import IsPurchasing, ReadOnlyOrPurchasing
from apps.suppliers.models import Supplier
from apps.suppliers.services import SupplierService

from ..serializers import (
    SupplierDetailSerializer, SupplierRatingSerializer, SupplierSerializer, SupplierWriteSerializer,
)
from .base import ServiceGenericViewSet


class SupplierViewSet(mixins.ListModelMixin, ServiceGenericViewSet):
    """ViewSet for Supplier model. Writes go through SupplierService."""
    service_class = SupplierService
    serializer_class = SupplierSerializer
    permission_classes = [ReadOnlyOrPurchasing]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status']
    search_fields = ['name', 'contact_name', 'contact_phone']
    ordering_fields = ['name', 'rating', 'created_at']
    ordering = ['name']

    def get_queryset(self):
        return Supplier.objects.all()

    @extend_schema(tags=['suppliers'], summary='List suppliers')
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        tags=['suppliers'],
        summary='Create a supplier',
        request=SupplierWriteSerializer,
        responses={201: SupplierSerializer},
    )
    def create(self, request):
        data = self.parse(SupplierWriteSerializer)
        supplier = self.get_service().create_supplier(
            name=data.get('name'),
            contact_name=data.get('contact_name', ''),
            contact_phone=data.get('contact_phone', ''),
            address=data.get('address', ''),
        )
        return Response(SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=['suppliers'], summary='Supplier detail with order statistics',
                   responses=SupplierDetailSerializer)
    def retrieve(self, request, pk=None):
        service = self.get_service()
        stats = service.order_stats(pk)
        supplier = Supplier.objects.get(pk=pk)
        return Response(SupplierDetailSerializer(supplier, context={'stats': stats}).data)

    @extend_schema(
        tags=['suppliers'],
        summary='Edit supplier contact details',
        request=SupplierWriteSerializer,
        responses=SupplierSerializer,
    )
    def partial_update(self, request, pk=None):
        data = self.parse(SupplierWriteSerializer, partial=True)
        supplier = self.get_service().update_supplier(pk, **data)
        return Response(SupplierSerializer(supplier).data)

    @extend_schema(tags=['suppliers'], summary='Block a supplier', request=None,
                   responses=SupplierSerializer)
    @action(detail=True, methods=['post'], permission_classes=[IsPurchasing])
    def block(self, request, pk=None):
        supplier = self.get_service().block_supplier(pk)
        return Response(SupplierSerializer(supplier).data)

    @extend_schema(tags=['suppliers'], summary='Activate a supplier', request=None,
                   responses=SupplierSerializer)
    @action(detail=True, methods=['post'], permission_classes=[IsPurchasing])
    def activate(self, request, pk=None):
        supplier = self.get_service().activate_supplier(pk)
        return Response(SupplierSerializer(supplier).data)

    @extend_schema(tags=['suppliers'], summary='Rate a supplier (0-5)',
                   request=SupplierRatingSerializer, responses=SupplierSerializer)
    @action(detail=True, methods=['post'], permission_classes=[IsPurchasing])
    def rating(self, request, pk=None):
        data = self.parse(SupplierRatingSerializer)
        supplier = self.get_service().rate_supplier(pk, data['rating'])
        return Response(SupplierSerializer(supplier).data)
