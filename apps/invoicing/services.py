# apps/invoicing/services.py
"""
Supplier settlement services.

ReconciliationService handles:
- Building a reconciliation from delivered orders in a period
- Sending it to the supplier, supplier confirmation, marking it paid
- Detail view: the orders it covers and the related invoices

InvoiceService handles:
- Supplier invoice upload
- Verification / rejection by finance
- Linking an invoice to a reconciliation of the same supplier
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone

from apps.notifications.models import NotificationType
from apps.notifications.services import NotificationEvent, dispatch_after_commit, notify_supplier_users
from apps.orders.models import DELIVERED_STATUSES, Order
from apps.orders.services import parse_amount, parse_optional_date
from apps.suppliers.models import Supplier
from shared.exceptions import Forbidden, NotFound, ValidationFailed
from shared.numbering import create_numbered, random_suffix
from users.models import FINANCE_ROLES

from .models import (
    INVOICE_WORKFLOW, RECONCILIATION_WORKFLOW,
    Invoice, Reconciliation,
)

logger = logging.getLogger(__name__)

RECONCILIATION_NUMBER_PREFIX = 'RC'


def delivered_orders(supplier_id, period_start, period_end):
    """Received/completed orders of a supplier delivered inside the period."""
    return Order.objects.filter(
        supplier_id=supplier_id,
        status__in=DELIVERED_STATUSES,
        delivery_date__gte=period_start,
        delivery_date__lte=period_end,
    )


@dataclass
class ReconciliationDetail:
    reconciliation: Reconciliation
    orders: List[Order]
    invoices: List[Invoice]


class _SettlementService:
    """Shared actor handling for reconciliation and invoice services."""

    def __init__(self, user, notifier=None):
        self.user = user
        self.notifier = notifier

    @property
    def is_supplier_user(self):
        return getattr(self.user, 'is_supplier_user', False)

    def _require_finance(self, operation):
        if getattr(self.user, 'role', None) not in FINANCE_ROLES:
            raise Forbidden(f"Your role cannot {operation}.")

    def _check_actor(self, record, transition):
        if not transition.allows_role(getattr(self.user, 'role', None)):
            raise Forbidden(f"Your role cannot {transition.action} this document.")
        if transition.owner_only and not self.user.owns_supplier(record.supplier_id):
            raise Forbidden("This document belongs to another supplier.")

    def _check_visible(self, record):
        if self.is_supplier_user and not self.user.owns_supplier(record.supplier_id):
            raise Forbidden("This document belongs to another supplier.")

    def _notify(self, recipient_ids, title, content, link, notification_type):
        dispatch_after_commit(
            self.notifier,
            recipient_ids,
            NotificationEvent(title=title, content=content, link=link, notification_type=notification_type),
        )

    def _notify_supplier(self, supplier_id, title, content, link, notification_type):
        notify_supplier_users(supplier_id, title, content, link, notification_type, sink=self.notifier)


class ReconciliationService(_SettlementService):
    """
    Service for supplier reconciliations.

    Usage:
        service = ReconciliationService(finance_user)
        rec = service.create_reconciliation(supplier_id, '2026-09-01', '2026-09-30')
        service.send_reconciliation(rec.pk)

        ReconciliationService(supplier_user).confirm_reconciliation(rec.pk)
        service.mark_paid(rec.pk)
    """

    def __init__(self, user, notifier=None, clock=None, suffix_generator=None):
        super().__init__(user, notifier)
        self.clock = clock or timezone.now
        self.suffix_generator = suffix_generator or random_suffix

    def _get(self, reconciliation_id, lock=False):
        qs = Reconciliation.objects.select_for_update() if lock else Reconciliation.objects.select_related('supplier')
        try:
            return qs.get(pk=reconciliation_id)
        except Reconciliation.DoesNotExist:
            raise NotFound(f"Reconciliation {reconciliation_id} does not exist.") from None

    def create_reconciliation(self, supplier_id, period_start, period_end):
        """
        Create a draft reconciliation totalling the supplier's delivered orders.

        Raises:
            Forbidden: actor is not admin/purchaser/finance
            ValidationFailed: missing supplier or period, or start after end
            NotFound: supplier does not exist
        """
        self._require_finance('create reconciliations')
        period_start = parse_optional_date(period_start, 'period_start')
        period_end = parse_optional_date(period_end, 'period_end')
        if not supplier_id or period_start is None or period_end is None:
            raise ValidationFailed("Supplier and period are required.")
        if period_start > period_end:
            raise ValidationFailed("period_start must not be after period_end.")
        if not Supplier.objects.filter(pk=supplier_id).exists():
            raise NotFound(f"Supplier {supplier_id} does not exist.")

        def insert(number):
            total = delivered_orders(supplier_id, period_start, period_end).aggregate(
                total=Sum('total_amount')
            )['total'] or Decimal('0')
            return Reconciliation.objects.create(
                reconciliation_number=number,
                supplier_id=supplier_id,
                period_start=period_start,
                period_end=period_end,
                total_amount=total,
                created_by=self.user,
            )

        with transaction.atomic():
            reconciliation = create_numbered(
                Reconciliation, 'reconciliation_number', RECONCILIATION_NUMBER_PREFIX, insert,
                when=self.clock(), suffix_generator=self.suffix_generator,
            )
        logger.info(
            f"Reconciliation {reconciliation.reconciliation_number} created for supplier {supplier_id} "
            f"({period_start}..{period_end}, total={reconciliation.total_amount})"
        )
        return reconciliation

    def _transition(self, reconciliation_id, action):
        with transaction.atomic():
            reconciliation = self._get(reconciliation_id, lock=True)
            self._check_actor(reconciliation, RECONCILIATION_WORKFLOW.get(action))
            old_status = reconciliation.status
            RECONCILIATION_WORKFLOW.apply(reconciliation, action)

            if action == 'send':
                self._notify_supplier(
                    reconciliation.supplier_id,
                    'Reconciliation to confirm',
                    f"Reconciliation {reconciliation.reconciliation_number} is waiting for your confirmation.",
                    f"/reconciliations/{reconciliation.pk}",
                    NotificationType.RECONCILIATION,
                )
            elif action == 'confirm':
                self._notify(
                    [reconciliation.created_by_id],
                    'Reconciliation confirmed',
                    f"Supplier confirmed reconciliation {reconciliation.reconciliation_number}.",
                    f"/reconciliations/{reconciliation.pk}",
                    NotificationType.RECONCILIATION,
                )

        logger.info(
            f"Reconciliation {reconciliation.reconciliation_number} {action}: "
            f"{old_status} -> {reconciliation.status}"
        )
        return reconciliation

    def send_reconciliation(self, reconciliation_id):
        return self._transition(reconciliation_id, 'send')

    def confirm_reconciliation(self, reconciliation_id):
        return self._transition(reconciliation_id, 'confirm')

    def mark_paid(self, reconciliation_id):
        return self._transition(reconciliation_id, 'pay')

    def list_reconciliations(self, status=None, supplier_id=None):
        qs = Reconciliation.objects.select_related('supplier')
        if self.is_supplier_user:
            qs = qs.filter(supplier_id=self.user.supplier_id)
        elif supplier_id:
            qs = qs.filter(supplier_id=supplier_id)
        if status:
            qs = qs.filter(status=status)
        return qs

    def get_detail(self, reconciliation_id):
        """
        The reconciliation plus the orders it covers and its invoices.

        Invoices are those linked to it, plus unlinked ones from the same
        supplier dated inside the period.
        """
        reconciliation = self._get(reconciliation_id)
        self._check_visible(reconciliation)
        orders = delivered_orders(
            reconciliation.supplier_id, reconciliation.period_start, reconciliation.period_end,
        ).select_related('material').order_by('delivery_date', 'id')
        invoices = Invoice.objects.filter(
            Q(reconciliation=reconciliation)
            | Q(
                reconciliation__isnull=True,
                supplier_id=reconciliation.supplier_id,
                invoice_date__gte=reconciliation.period_start,
                invoice_date__lte=reconciliation.period_end,
            )
        )
        return ReconciliationDetail(reconciliation, list(orders), list(invoices))


class InvoiceService(_SettlementService):
    """
    Service for supplier invoices.

    Usage:
        invoice = InvoiceService(supplier_user).upload_invoice(invoice_no='INV-1', amount='1000')
        InvoiceService(finance_user).verify_invoice(invoice.pk)
    """

    def _get(self, invoice_id, lock=False):
        qs = Invoice.objects.select_for_update() if lock else Invoice.objects.select_related('supplier')
        try:
            return qs.get(pk=invoice_id)
        except Invoice.DoesNotExist:
            raise NotFound(f"Invoice {invoice_id} does not exist.") from None

    def upload_invoice(self, invoice_no, amount, invoice_date=None, tax_amount=None, image_url=''):
        if not self.is_supplier_user or not self.user.supplier_id:
            raise Forbidden("Only supplier users can upload invoices.")
        invoice_no = (invoice_no or '').strip()
        if not invoice_no:
            raise ValidationFailed("Invoice number and amount are required.")
        amount = parse_amount(amount, 'amount', allow_zero=True)
        tax_amount = parse_amount(tax_amount, 'tax_amount', required=False, allow_zero=True) or Decimal('0')
        invoice_date = parse_optional_date(invoice_date, 'invoice_date')

        with transaction.atomic():
            invoice = Invoice.objects.create(
                supplier_id=self.user.supplier_id,
                invoice_no=invoice_no,
                invoice_date=invoice_date,
                amount=amount,
                tax_amount=tax_amount,
                image_url=image_url or '',
                uploaded_by=self.user,
            )
        logger.info(f"Invoice {invoice.invoice_no} uploaded by supplier {invoice.supplier_id}")
        return invoice

    @transaction.atomic
    def verify_invoice(self, invoice_id):
        invoice = self._get(invoice_id, lock=True)
        self._check_actor(invoice, INVOICE_WORKFLOW.get('verify'))
        INVOICE_WORKFLOW.apply(invoice, 'verify')
        self._notify_supplier(
            invoice.supplier_id,
            'Invoice verified',
            f"Invoice {invoice.invoice_no} has been verified.",
            f"/invoices/{invoice.pk}",
            NotificationType.INVOICE,
        )
        logger.info(f"Invoice {invoice.invoice_no} verified")
        return invoice

    @transaction.atomic
    def reject_invoice(self, invoice_id, reason=''):
        invoice = self._get(invoice_id, lock=True)
        self._check_actor(invoice, INVOICE_WORKFLOW.get('reject'))
        INVOICE_WORKFLOW.apply(invoice, 'reject', reject_reason=reason or '')
        content = f"Invoice {invoice.invoice_no} was rejected."
        if reason:
            content = f"{content} Reason: {reason}"
        self._notify_supplier(
            invoice.supplier_id,
            'Invoice rejected',
            content,
            f"/invoices/{invoice.pk}",
            NotificationType.INVOICE,
        )
        logger.info(f"Invoice {invoice.invoice_no} rejected")
        return invoice

    @transaction.atomic
    def link_invoice(self, invoice_id, reconciliation_id):
        """Attach an invoice to a reconciliation of the same supplier."""
        self._require_finance('link invoices')
        invoice = self._get(invoice_id, lock=True)
        try:
            reconciliation = Reconciliation.objects.get(pk=reconciliation_id)
        except Reconciliation.DoesNotExist:
            raise NotFound(f"Reconciliation {reconciliation_id} does not exist.") from None
        if reconciliation.supplier_id != invoice.supplier_id:
            raise ValidationFailed("Invoice and reconciliation belong to different suppliers.")
        invoice.reconciliation = reconciliation
        invoice.save(update_fields=['reconciliation', 'updated_at'])
        return invoice

    def list_invoices(self, status=None, supplier_id=None):
        qs = Invoice.objects.select_related('supplier', 'reconciliation')
        if self.is_supplier_user:
            qs = qs.filter(supplier_id=self.user.supplier_id)
        elif supplier_id:
            qs = qs.filter(supplier_id=supplier_id)
        if status:
            qs = qs.filter(status=status)
        return qs

    def get_invoice(self, invoice_id):
        invoice = self._get(invoice_id)
        self._check_visible(invoice)
        return invoice
