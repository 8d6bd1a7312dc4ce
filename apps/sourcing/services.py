# apps/sourcing/services.py
"""
RFQ / quotation business logic.

SourcingService handles:
- Inquiry drafting, publishing and closing
- Supplier quotation submission (one per inquiry)
- Accepting a quotation, which places a purchase order through OrderService
- Rejecting a quotation with a reason
"""
import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.notifications.models import NotificationType
from apps.notifications.services import NotificationEvent, dispatch_after_commit, notify_supplier_users
from apps.materials.models import material_exists
from apps.orders.services import MaterialNotFound, OrderService, parse_amount, parse_optional_date
from apps.suppliers.models import SupplierStatus
from shared.exceptions import Forbidden, InvalidTransition, NotFound, ValidationFailed
from shared.numbering import create_numbered, random_suffix

from .models import (
    INQUIRY_WORKFLOW, QUOTATION_WORKFLOW, QUOTING_ROLES,
    Inquiry, InquiryStatus, Quotation,
)

logger = logging.getLogger(__name__)

INQUIRY_NUMBER_PREFIX = 'IQ'
INQUIRY_EDITABLE_FIELDS = ('title', 'description', 'deadline')


class SourcingService:
    """
    Service for inquiries and quotations.

    Usage:
        service = SourcingService(purchaser)
        inquiry = service.create_inquiry(title='Bearings Q4')
        service.publish_inquiry(inquiry.pk)

        SourcingService(supplier_user).submit_quotation(inquiry.pk, unit_price='24.50', ...)
        order = service.accept_quotation(quotation.pk)
    """

    def __init__(self, user, notifier=None, clock=None, suffix_generator=None):
        self.user = user
        self.notifier = notifier
        self.clock = clock or timezone.now
        self.suffix_generator = suffix_generator or random_suffix

    def _require_role(self, transition_or_roles, operation):
        roles = getattr(transition_or_roles, 'roles', transition_or_roles)
        if getattr(self.user, 'role', None) not in roles:
            raise Forbidden(f"Your role cannot {operation}.")

    def _notify(self, recipient_ids, title, content, link):
        dispatch_after_commit(
            self.notifier,
            recipient_ids,
            NotificationEvent(title=title, content=content, link=link,
                              notification_type=NotificationType.INQUIRY),
        )

    def _notify_supplier(self, supplier_id, title, content, link):
        notify_supplier_users(
            supplier_id, title, content, link, NotificationType.INQUIRY, sink=self.notifier,
        )

    # ── inquiries ────────────────────────────────────────────────────────────

    def _get_inquiry(self, inquiry_id, lock=False):
        qs = Inquiry.objects.select_for_update() if lock else Inquiry.objects
        try:
            return qs.get(pk=inquiry_id)
        except Inquiry.DoesNotExist:
            raise NotFound(f"Inquiry {inquiry_id} does not exist.") from None

    def create_inquiry(self, title, description='', deadline=None):
        self._require_role(INQUIRY_WORKFLOW.get('publish'), 'create inquiries')
        title = (title or '').strip()
        if not title:
            raise ValidationFailed("Inquiry title is required.")
        deadline = parse_optional_date(deadline, 'deadline')

        def insert(number):
            return Inquiry.objects.create(
                inquiry_number=number,
                title=title,
                description=description or '',
                deadline=deadline,
                created_by=self.user,
            )

        with transaction.atomic():
            inquiry = create_numbered(
                Inquiry, 'inquiry_number', INQUIRY_NUMBER_PREFIX, insert,
                when=self.clock(), suffix_generator=self.suffix_generator,
            )
        logger.info(f"Inquiry {inquiry.inquiry_number} drafted by {self.user}")
        return inquiry

    @transaction.atomic
    def update_inquiry(self, inquiry_id, **fields):
        """Edit a draft inquiry."""
        unknown = set(fields) - set(INQUIRY_EDITABLE_FIELDS)
        if unknown:
            raise ValidationFailed(f"Cannot edit inquiry fields: {', '.join(sorted(unknown))}")

        inquiry = self._get_inquiry(inquiry_id, lock=True)
        self._require_role(INQUIRY_WORKFLOW.get('publish'), 'edit inquiries')
        if inquiry.status != InquiryStatus.DRAFT:
            raise InvalidTransition(inquiry.status, 'update')

        if 'title' in fields:
            title = (fields['title'] or '').strip()
            if not title:
                raise ValidationFailed("Inquiry title is required.")
            inquiry.title = title
        if 'description' in fields:
            inquiry.description = fields['description'] or ''
        if 'deadline' in fields:
            inquiry.deadline = parse_optional_date(fields['deadline'], 'deadline')
        inquiry.save()
        return inquiry

    @transaction.atomic
    def publish_inquiry(self, inquiry_id):
        """Publish a draft inquiry and tell every active supplier about it."""
        inquiry = self._get_inquiry(inquiry_id, lock=True)
        self._require_role(INQUIRY_WORKFLOW.get('publish'), 'publish inquiries')
        INQUIRY_WORKFLOW.apply(inquiry, 'publish')

        recipients = get_user_model().objects.filter(
            supplier__status=SupplierStatus.ACTIVE, is_active=True,
        ).values_list('pk', flat=True)
        self._notify(
            list(recipients),
            'New inquiry',
            f"Inquiry {inquiry.inquiry_number} '{inquiry.title}' is open for quotations.",
            f"/sourcing/inquiries/{inquiry.pk}",
        )
        logger.info(f"Inquiry {inquiry.inquiry_number} published")
        return inquiry

    @transaction.atomic
    def close_inquiry(self, inquiry_id):
        inquiry = self._get_inquiry(inquiry_id, lock=True)
        self._require_role(INQUIRY_WORKFLOW.get('close'), 'close inquiries')
        INQUIRY_WORKFLOW.apply(inquiry, 'close')
        logger.info(f"Inquiry {inquiry.inquiry_number} closed")
        return inquiry

    def list_inquiries(self, status=None):
        """Suppliers never see drafts."""
        qs = Inquiry.objects.select_related('created_by')
        if getattr(self.user, 'is_supplier_user', False):
            qs = qs.exclude(status=InquiryStatus.DRAFT)
        if status:
            qs = qs.filter(status=status)
        return qs

    def get_inquiry(self, inquiry_id):
        inquiry = self._get_inquiry(inquiry_id)
        if getattr(self.user, 'is_supplier_user', False) and inquiry.status == InquiryStatus.DRAFT:
            raise NotFound(f"Inquiry {inquiry_id} does not exist.")
        return inquiry

    # ── quotations ───────────────────────────────────────────────────────────

    def quotations_for_inquiry(self, inquiry_id):
        """All quotations for purchasers; only their own for suppliers."""
        inquiry = self.get_inquiry(inquiry_id)
        qs = inquiry.quotations.select_related('supplier', 'material')
        if getattr(self.user, 'is_supplier_user', False):
            qs = qs.filter(supplier_id=self.user.supplier_id)
        return qs

    def my_quotations(self):
        if not getattr(self.user, 'is_supplier_user', False):
            raise Forbidden("Only supplier users have quotations.")
        return (
            Quotation.objects.filter(supplier_id=self.user.supplier_id)
            .select_related('inquiry', 'material')
            .order_by('-created_at')
        )

    def submit_quotation(self, inquiry_id, unit_price, quantity=None, material_id=None,
                         delivery_days=None, valid_until=None):
        """
        Submit the current supplier's offer for a published inquiry.

        Raises:
            Forbidden: actor is not a supplier user
            NotFound: inquiry missing
            InvalidTransition: inquiry is not published
            ValidationFailed: bad input, or this supplier already quoted
        """
        self._require_role(QUOTING_ROLES, 'submit quotations')
        if not self.user.supplier_id:
            raise Forbidden("Your account is not linked to a supplier.")

        unit_price = parse_amount(unit_price, 'unit_price', allow_zero=True)
        quantity = parse_amount(quantity, 'quantity', required=False)
        valid_until = parse_optional_date(valid_until, 'valid_until')
        if material_id and not material_exists(material_id):
            raise MaterialNotFound(f"Material {material_id} does not exist.")
        if delivery_days not in (None, ''):
            try:
                delivery_days = int(delivery_days)
            except (TypeError, ValueError):
                raise ValidationFailed("delivery_days must be a whole number.") from None
            if delivery_days < 0:
                raise ValidationFailed("delivery_days cannot be negative.")
        else:
            delivery_days = None

        with transaction.atomic():
            inquiry = self.get_inquiry(inquiry_id)
            if inquiry.status != InquiryStatus.PUBLISHED:
                raise InvalidTransition(inquiry.status, 'quote')
            if Quotation.objects.filter(inquiry=inquiry, supplier_id=self.user.supplier_id).exists():
                raise ValidationFailed("Your company has already quoted on this inquiry.")
            try:
                with transaction.atomic():
                    quotation = Quotation.objects.create(
                        inquiry=inquiry,
                        supplier_id=self.user.supplier_id,
                        material_id=material_id or None,
                        quantity=quantity,
                        unit_price=unit_price,
                        delivery_days=delivery_days,
                        valid_until=valid_until,
                        submitted_by=self.user,
                    )
            except IntegrityError:
                raise ValidationFailed("Your company has already quoted on this inquiry.") from None

            self._notify(
                [inquiry.created_by_id],
                'New quotation',
                f"{quotation.supplier.name} quoted {quotation.unit_price} on {inquiry.inquiry_number}.",
                f"/sourcing/inquiries/{inquiry.pk}",
            )
        logger.info(f"Quotation {quotation.pk} submitted for {inquiry.inquiry_number}")
        return quotation

    def _lock_quotation(self, quotation_id):
        try:
            return Quotation.objects.select_for_update().select_related('inquiry').get(pk=quotation_id)
        except Quotation.DoesNotExist:
            raise NotFound(f"Quotation {quotation_id} does not exist.") from None

    @transaction.atomic
    def accept_quotation(self, quotation_id):
        """
        Accept a pending quotation and place the matching purchase order.

        The order goes through OrderService.create_order, so it gets a PO
        number, a 'created' log entry and the usual supplier checks.
        Delivery date is today + delivery_days.
        """
        quotation = self._lock_quotation(quotation_id)
        self._require_role(QUOTATION_WORKFLOW.get('accept'), 'accept quotations')
        QUOTATION_WORKFLOW.check('accept', quotation.status)
        if not quotation.material_id or not quotation.quantity:
            raise ValidationFailed("Quotation needs a material and quantity before it can be accepted.")

        today = timezone.localdate(self.clock())
        delivery_date = today + timedelta(days=quotation.delivery_days) if quotation.delivery_days else None
        order = OrderService(
            self.user, notifier=self.notifier, clock=self.clock, suffix_generator=self.suffix_generator,
        ).create_order(
            supplier_id=quotation.supplier_id,
            material_id=quotation.material_id,
            quantity=quotation.quantity,
            unit_price=quotation.unit_price,
            delivery_date=delivery_date,
            notes=f"From quotation on inquiry {quotation.inquiry.inquiry_number}",
        )
        QUOTATION_WORKFLOW.apply(quotation, 'accept', order=order)

        self._notify_supplier(
            quotation.supplier_id,
            'Quotation accepted',
            f"Your quotation on {quotation.inquiry.inquiry_number} was accepted; order {order.order_number} placed.",
            f"/orders/{order.pk}",
        )
        logger.info(f"Quotation {quotation.pk} accepted -> order {order.order_number}")
        return quotation

    @transaction.atomic
    def reject_quotation(self, quotation_id, reason=''):
        quotation = self._lock_quotation(quotation_id)
        self._require_role(QUOTATION_WORKFLOW.get('reject'), 'reject quotations')
        QUOTATION_WORKFLOW.apply(quotation, 'reject', reject_reason=reason or '')

        content = f"Your quotation on {quotation.inquiry.inquiry_number} was not accepted."
        if reason:
            content = f"{content} Reason: {reason}"
        self._notify_supplier(
            quotation.supplier_id,
            'Quotation rejected',
            content,
            f"/sourcing/inquiries/{quotation.inquiry_id}",
        )
        logger.info(f"Quotation {quotation.pk} rejected")
        return quotation
