# apps/api/v1/views/invoicing.py
"""
Settlement endpoints: reconciliations and supplier invoices.

GET    /reconciliations/                 supplier users see their own
POST   /reconciliations/                 finance / purchasing
GET    /reconciliations/{id}/            header + covered orders + invoices
POST   /reconciliations/{id}/send/
POST   /reconciliations/{id}/confirm/    supplier
POST   /reconciliations/{id}/paid/

GET    /invoices/
POST   /invoices/                        supplier uploads
GET    /invoices/{id}/
POST   /invoices/{id}/verify/
POST   /invoices/{id}/reject/            { "reason": "..." }
POST   /invoices/{id}/link/              { "reconciliation": id }
"""
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.invoicing.services import InvoiceService, ReconciliationService

from ..serializers import (
    InvoiceLinkSerializer, InvoiceSerializer, InvoiceUploadSerializer,
    ReconciliationCreateSerializer, ReconciliationDetailSerializer, ReconciliationSerializer,
    RejectSerializer,
)
from .base import ServiceGenericViewSet


class ReconciliationViewSet(mixins.ListModelMixin, ServiceGenericViewSet):
    service_class = ReconciliationService
    serializer_class = ReconciliationSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'supplier']
    ordering_fields = ['created_at', 'period_start', 'total_amount']
    ordering = ['-created_at']

    def get_queryset(self):
        return self.get_service().list_reconciliations()

    @extend_schema(tags=['invoicing'], summary='List reconciliations')
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(tags=['invoicing'], summary='Create a reconciliation for a period',
                   request=ReconciliationCreateSerializer, responses={201: ReconciliationSerializer})
    def create(self, request):
        data = self.parse(ReconciliationCreateSerializer)
        reconciliation = self.get_service().create_reconciliation(
            data['supplier'], data['period_start'], data['period_end'],
        )
        return Response(ReconciliationSerializer(reconciliation).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=['invoicing'], summary='Reconciliation with its orders and invoices',
                   responses=ReconciliationDetailSerializer)
    def retrieve(self, request, pk=None):
        detail = self.get_service().get_detail(pk)
        return Response(ReconciliationDetailSerializer(detail).data)

    @extend_schema(tags=['invoicing'], summary='Send to the supplier for confirmation', request=None,
                   responses=ReconciliationSerializer)
    @action(detail=True, methods=['post'])
    def send(self, request, pk=None):
        return Response(ReconciliationSerializer(self.get_service().send_reconciliation(pk)).data)

    @extend_schema(tags=['invoicing'], summary='Supplier confirms the reconciliation', request=None,
                   responses=ReconciliationSerializer)
    @action(detail=True, methods=['post'])
    def confirm(self, request, pk=None):
        return Response(ReconciliationSerializer(self.get_service().confirm_reconciliation(pk)).data)

    @extend_schema(tags=['invoicing'], summary='Mark the reconciliation paid', request=None,
                   responses=ReconciliationSerializer)
    @action(detail=True, methods=['post'])
    def paid(self, request, pk=None):
        return Response(ReconciliationSerializer(self.get_service().mark_paid(pk)).data)


class InvoiceViewSet(mixins.ListModelMixin, ServiceGenericViewSet):
    service_class = InvoiceService
    serializer_class = InvoiceSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['status', 'supplier', 'reconciliation']
    search_fields = ['invoice_no']
    ordering_fields = ['created_at', 'invoice_date', 'amount']
    ordering = ['-created_at']

    def get_queryset(self):
        return self.get_service().list_invoices()

    @extend_schema(tags=['invoicing'], summary='List invoices')
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(tags=['invoicing'], summary='Upload a supplier invoice',
                   request=InvoiceUploadSerializer, responses={201: InvoiceSerializer})
    def create(self, request):
        data = self.parse(InvoiceUploadSerializer)
        invoice = self.get_service().upload_invoice(
            invoice_no=data['invoice_no'],
            amount=data['amount'],
            invoice_date=data.get('invoice_date'),
            tax_amount=data.get('tax_amount'),
            image_url=data.get('image_url', ''),
        )
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=['invoicing'], summary='Get an invoice', responses=InvoiceSerializer)
    def retrieve(self, request, pk=None):
        return Response(InvoiceSerializer(self.get_service().get_invoice(pk)).data)

    @extend_schema(tags=['invoicing'], summary='Verify an invoice', request=None,
                   responses=InvoiceSerializer)
    @action(detail=True, methods=['post'])
    def verify(self, request, pk=None):
        return Response(InvoiceSerializer(self.get_service().verify_invoice(pk)).data)

    @extend_schema(tags=['invoicing'], summary='Reject an invoice', request=RejectSerializer,
                   responses=InvoiceSerializer)
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        data = self.parse(RejectSerializer)
        return Response(InvoiceSerializer(self.get_service().reject_invoice(pk, data['reason'])).data)

    @extend_schema(tags=['invoicing'], summary='Link an invoice to a reconciliation',
                   request=InvoiceLinkSerializer, responses=InvoiceSerializer)
    @action(detail=True, methods=['post'])
    def link(self, request, pk=None):
        data = self.parse(InvoiceLinkSerializer)
        return Response(InvoiceSerializer(self.get_service().link_invoice(pk, data['reconciliation'])).data)
