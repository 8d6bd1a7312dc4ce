# apps/api/v1/views/sourcing.py
"""
RFQ endpoints: inquiries and supplier quotations.

GET    /inquiries/                     suppliers never see drafts
POST   /inquiries/                     purchasing
GET    /inquiries/{id}/
PATCH  /inquiries/{id}/                draft only
POST   /inquiries/{id}/publish/
POST   /inquiries/{id}/close/
GET    /inquiries/{id}/quotations/     all quotations, or the supplier's own
POST   /inquiries/{id}/quotations/     supplier submits a quotation
GET    /quotations/mine/               supplier's quotations
POST   /quotations/{id}/accept/        creates the purchase order
POST   /quotations/{id}/reject/        { "reason": "..." }
"""
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.sourcing.services import SourcingService

from ..serializers import (
    InquirySerializer, InquiryWriteSerializer,
    OrderSerializer, QuotationSerializer, QuotationSubmitSerializer, RejectSerializer,
)
from .base import ServiceGenericViewSet, ServiceViewSetMixin


class InquiryViewSet(mixins.ListModelMixin, ServiceGenericViewSet):
    """ViewSet for inquiries. Listing is scoped by SourcingService."""
    service_class = SourcingService
    serializer_class = InquirySerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status']
    search_fields = ['inquiry_number', 'title']
    ordering_fields = ['created_at', 'deadline']
    ordering = ['-created_at']

    def get_queryset(self):
        return self.get_service().list_inquiries()

    @extend_schema(tags=['sourcing'], summary='List inquiries')
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(tags=['sourcing'], summary='Draft an inquiry',
                   request=InquiryWriteSerializer, responses={201: InquirySerializer})
    def create(self, request):
        data = self.parse(InquiryWriteSerializer)
        inquiry = self.get_service().create_inquiry(
            title=data.get('title'),
            description=data.get('description', ''),
            deadline=data.get('deadline'),
        )
        return Response(InquirySerializer(inquiry).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=['sourcing'], summary='Get an inquiry', responses=InquirySerializer)
    def retrieve(self, request, pk=None):
        return Response(InquirySerializer(self.get_service().get_inquiry(pk)).data)

    @extend_schema(tags=['sourcing'], summary='Edit a draft inquiry',
                   request=InquiryWriteSerializer, responses=InquirySerializer)
    def partial_update(self, request, pk=None):
        data = self.parse(InquiryWriteSerializer, partial=True)
        inquiry = self.get_service().update_inquiry(pk, **data)
        return Response(InquirySerializer(inquiry).data)

    @extend_schema(tags=['sourcing'], summary='Publish an inquiry to suppliers', request=None,
                   responses=InquirySerializer)
    @action(detail=True, methods=['post'])
    def publish(self, request, pk=None):
        return Response(InquirySerializer(self.get_service().publish_inquiry(pk)).data)

    @extend_schema(tags=['sourcing'], summary='Close an inquiry', request=None,
                   responses=InquirySerializer)
    @action(detail=True, methods=['post'])
    def close(self, request, pk=None):
        return Response(InquirySerializer(self.get_service().close_inquiry(pk)).data)

    @extend_schema(tags=['sourcing'], summary='Quotations for an inquiry',
                   responses=QuotationSerializer(many=True))
    @action(detail=True, methods=['get'])
    def quotations(self, request, pk=None):
        quotations = self.get_service().quotations_for_inquiry(pk)
        return Response(QuotationSerializer(quotations, many=True).data)

    @extend_schema(tags=['sourcing'], summary='Submit a quotation',
                   request=QuotationSubmitSerializer, responses={201: QuotationSerializer})
    @quotations.mapping.post
    def submit_quotation(self, request, pk=None):
        data = self.parse(QuotationSubmitSerializer)
        quotation = self.get_service().submit_quotation(
            pk,
            unit_price=data['unit_price'],
            quantity=data.get('quantity'),
            material_id=data.get('material'),
            delivery_days=data.get('delivery_days'),
            valid_until=data.get('valid_until'),
        )
        return Response(QuotationSerializer(quotation).data, status=status.HTTP_201_CREATED)


class QuotationViewSet(ServiceViewSetMixin, viewsets.ViewSet):
    """Quotation decisions and the supplier's own quotation list."""
    service_class = SourcingService
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=['sourcing'], summary='My quotations', responses=QuotationSerializer(many=True))
    @action(detail=False, methods=['get'])
    def mine(self, request):
        return Response(QuotationSerializer(self.get_service().my_quotations(), many=True).data)

    @extend_schema(tags=['sourcing'], summary='Accept a quotation and place the order', request=None,
                   responses=QuotationSerializer)
    @action(detail=True, methods=['post'])
    def accept(self, request, pk=None):
        quotation = self.get_service().accept_quotation(pk)
        data = QuotationSerializer(quotation).data
        data['order_detail'] = OrderSerializer(quotation.order).data
        return Response(data)

    @extend_schema(tags=['sourcing'], summary='Reject a quotation', request=RejectSerializer,
                   responses=QuotationSerializer)
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        data = self.parse(RejectSerializer)
        return Response(QuotationSerializer(self.get_service().reject_quotation(pk, data['reason'])).data)
