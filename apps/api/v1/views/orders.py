# apps/api/v1/views/orders.py
"""
Purchase order endpoints.

All reads and writes go through OrderService, which scopes supplier users
to their own orders and owns every status change.

GET    /orders/                 filtered page (status, supplier_id, start_date, end_date, search)
POST   /orders/                 create (purchasing)
GET    /orders/{id}/            detail with timeline
PATCH  /orders/{id}/            edit quantity / unit_price / delivery_date / notes
POST   /orders/{id}/confirm/    supplier
POST   /orders/{id}/ship/       supplier, { "tracking_no": "..." }
POST   /orders/{id}/receive/    purchasing
POST   /orders/{id}/complete/   purchasing
POST   /orders/{id}/cancel/     purchasing, { "reason": "..." }
GET    /orders/{id}/timeline/
"""
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.orders.services import OrderService

from ..serializers import (
    CancelOrderSerializer, OrderCreateSerializer, OrderDetailSerializer, OrderListQuerySerializer,
    OrderLogSerializer, OrderSerializer, OrderUpdateSerializer, ShipOrderSerializer,
)
from .base import ServiceViewSetMixin


class OrderViewSet(ServiceViewSetMixin, viewsets.ViewSet):
    """ViewSet for purchase orders and their lifecycle actions."""
    service_class = OrderService
    permission_classes = [IsAuthenticated]

    def _detail(self, order_id):
        order = self.get_service().get_order(order_id)
        return Response(OrderDetailSerializer(order).data)

    @extend_schema(
        tags=['orders'],
        summary='List purchase orders',
        parameters=[OrderListQuerySerializer],
        responses=OrderSerializer(many=True),
    )
    def list(self, request):
        params = self.parse(OrderListQuerySerializer, data=request.query_params)
        page = self.get_service().list_orders(**params)
        return Response({
            'count': page.total,
            'page': page.page,
            'page_size': page.page_size,
            'results': OrderSerializer(page.items, many=True).data,
        })

    @extend_schema(
        tags=['orders'],
        summary='Create a purchase order',
        request=OrderCreateSerializer,
        responses={201: OrderDetailSerializer},
    )
    def create(self, request):
        data = self.parse(OrderCreateSerializer)
        order = self.get_service().create_order(
            supplier_id=data['supplier'],
            material_id=data['material'],
            quantity=data['quantity'],
            unit_price=data.get('unit_price'),
            delivery_date=data.get('delivery_date'),
            notes=data.get('notes', ''),
        )
        detail = self.get_service().get_order(order.pk)
        return Response(OrderDetailSerializer(detail).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=['orders'], summary='Order detail with timeline', responses=OrderDetailSerializer)
    def retrieve(self, request, pk=None):
        return self._detail(pk)

    @extend_schema(
        tags=['orders'],
        summary='Edit an order that is not completed or cancelled',
        request=OrderUpdateSerializer,
        responses=OrderDetailSerializer,
    )
    def partial_update(self, request, pk=None):
        data = self.parse(OrderUpdateSerializer, partial=True)
        self.get_service().update_order(pk, **data)
        return self._detail(pk)

    @extend_schema(tags=['orders'], summary='Supplier confirms the order', request=None,
                   responses=OrderDetailSerializer)
    @action(detail=True, methods=['post'])
    def confirm(self, request, pk=None):
        self.get_service().confirm_order(pk)
        return self._detail(pk)

    @extend_schema(tags=['orders'], summary='Supplier ships the order', request=ShipOrderSerializer,
                   responses=OrderDetailSerializer)
    @action(detail=True, methods=['post'])
    def ship(self, request, pk=None):
        data = self.parse(ShipOrderSerializer)
        self.get_service().ship_order(pk, tracking_no=data['tracking_no'])
        return self._detail(pk)

    @extend_schema(tags=['orders'], summary='Record goods received', request=None,
                   responses=OrderDetailSerializer)
    @action(detail=True, methods=['post'])
    def receive(self, request, pk=None):
        self.get_service().receive_order(pk)
        return self._detail(pk)

    @extend_schema(tags=['orders'], summary='Complete a received order', request=None,
                   responses=OrderDetailSerializer)
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        self.get_service().complete_order(pk)
        return self._detail(pk)

    @extend_schema(tags=['orders'], summary='Cancel an order', request=CancelOrderSerializer,
                   responses=OrderDetailSerializer)
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        data = self.parse(CancelOrderSerializer)
        self.get_service().cancel_order(pk, reason=data['reason'])
        return self._detail(pk)

    @extend_schema(
        tags=['orders'],
        summary='Status timeline of an order',
        parameters=[OpenApiParameter('id', int, OpenApiParameter.PATH)],
        responses=OrderLogSerializer(many=True),
    )
    @action(detail=True, methods=['get'])
    def timeline(self, request, pk=None):
        logs = self.get_service().get_timeline(pk)
        return Response(OrderLogSerializer(logs, many=True).data)
