# apps/orders/services.py
"""
Order lifecycle business logic.

OrderService is the only writer of Order.status, Order.tracking_no and
OrderLog. Every transition runs in one transaction:

    lock row -> check actor -> check terminal -> check source status
    -> conditional UPDATE ... WHERE status = <expected> -> append OrderLog

A conditional update that matches no row means another request moved the
order first; the transition fails with InvalidTransition and rolls back.
Notifications are scheduled for after commit and never fail a transition.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date

from apps.materials.models import material_exists
from apps.notifications.models import NotificationType
from apps.notifications.services import NotificationEvent, dispatch_after_commit, notify_supplier_users
from apps.suppliers.services import is_supplier_active
from shared.exceptions import Forbidden, NotFound, ServiceError, ValidationFailed
from shared.numbering import DuplicateNumber, create_numbered, random_suffix

from .models import LOG_ACTIONS, ORDER_WORKFLOW, Order, OrderAction, OrderLog, OrderStatus

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = 'PO'
EDITABLE_FIELDS = ('quantity', 'unit_price', 'delivery_date', 'notes')
MAX_PAGE_SIZE = 100

# Largest value a DecimalField(max_digits=12, decimal_places=2) holds
AMOUNT_LIMIT = Decimal('10000000000')


# =============================================================================
# EXCEPTIONS
# =============================================================================

class OrderTerminal(ServiceError):
    """Raised when a completed or cancelled order is asked to change."""
    kind = 'order_terminal'
    status_code = 409

    def __init__(self, order, operation):
        self.current_status = order.status
        self.operation = operation
        super().__init__(
            f"Order {order.order_number} is {order.status}; it can no longer be changed."
        )

    def as_dict(self):
        data = super().as_dict()
        data['current_status'] = self.current_status
        data['operation'] = self.operation
        return data


class SupplierInactive(ServiceError):
    kind = 'supplier_inactive'
    status_code = 400

    def default_message(self):
        return 'Supplier does not exist or is not active.'


class MaterialNotFound(ServiceError):
    kind = 'material_not_found'
    status_code = 400

    def default_message(self):
        return 'Material does not exist.'


class DuplicateOrderNumber(DuplicateNumber):
    kind = 'duplicate_order_number'


# =============================================================================
# VALUE PARSING
# =============================================================================

def parse_amount(value, field_name, required=True, allow_zero=False):
    """
    Convert ``value`` to a Decimal with at most two decimal places.

    Floats go through str() so 0.1 becomes Decimal('0.1'), not its binary
    expansion.
    """
    if value is None or value == '':
        if required:
            raise ValidationFailed(f"{field_name} is required.")
        return None
    if isinstance(value, bool):
        raise ValidationFailed(f"{field_name} must be a number.")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationFailed(f"{field_name} must be a number.") from None
    if not amount.is_finite():
        raise ValidationFailed(f"{field_name} must be a number.")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationFailed(f"{field_name} must be greater than zero.")
    if amount != amount.quantize(Decimal('0.01')):
        raise ValidationFailed(f"{field_name} allows at most two decimal places.")
    if amount >= AMOUNT_LIMIT:
        raise ValidationFailed(f"{field_name} is too large.")
    return amount.quantize(Decimal('0.01'))


def parse_optional_date(value, field_name='delivery_date'):
    if value is None or value == '':
        return None
    if hasattr(value, 'year') and hasattr(value, 'day'):
        return value
    try:
        parsed = parse_date(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationFailed(f"{field_name} must be a date (YYYY-MM-DD).")
    return parsed


@dataclass
class OrderPage:
    """One page of list_orders() results."""
    items: List[Order]
    total: int
    page: int
    page_size: int


# =============================================================================
# SERVICE
# =============================================================================

class OrderService:
    """
    Service for purchase order lifecycle operations.

    Usage:
        service = OrderService(request.user)
        order = service.create_order(supplier_id=1, material_id=2, quantity='10', unit_price='100.00')

        OrderService(supplier_user).confirm_order(order.pk)
        OrderService(supplier_user).ship_order(order.pk, tracking_no='SF123')

    Collaborators can be injected for tests:
        notifier         - object with notify(user_id, event)
        clock            - zero-arg callable returning an aware datetime; stamps
                           order timestamps, log entries and order numbers
        suffix_generator - zero-arg callable returning an int in [0, 9999]
    """

    def __init__(self, user, notifier=None, clock=None, suffix_generator=None):
        self.user = user
        self.notifier = notifier
        self.clock = clock or timezone.now
        self.suffix_generator = suffix_generator or random_suffix

    # ── actor checks ─────────────────────────────────────────────────────────

    @property
    def role(self):
        return getattr(self.user, 'role', None)

    def _require_purchasing(self, operation):
        if not getattr(self.user, 'is_purchasing', False):
            raise Forbidden(f"Only purchasers can {operation} orders.")

    def _check_actor(self, order, transition):
        if not transition.allows_role(self.role):
            raise Forbidden(f"Your role cannot {transition.action} orders.")
        if transition.owner_only and not self.user.owns_supplier(order.supplier_id):
            raise Forbidden(f"Order {order.order_number} belongs to another supplier.")

    def _check_visible(self, order):
        if getattr(self.user, 'is_supplier_user', False) and not self.user.owns_supplier(order.supplier_id):
            raise Forbidden(f"Order {order.order_number} belongs to another supplier.")

    # ── row access ───────────────────────────────────────────────────────────

    def _lock_order(self, order_id):
        try:
            return Order.objects.select_for_update().get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound(f"Order {order_id} does not exist.") from None

    def _get_order(self, order_id):
        try:
            return Order.objects.select_related('supplier', 'material', 'created_by').get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound(f"Order {order_id} does not exist.") from None

    def _write_log(self, order, action, old_status, new_status, remark, now):
        return OrderLog.objects.create(
            order=order,
            action=action,
            old_status=old_status,
            new_status=new_status,
            operator=self.user,
            remark=remark,
            created_at=now,
        )

    def _notify(self, order, title, content, recipient_ids=None):
        """Notify ``recipient_ids``, or the order's supplier users when omitted."""
        link = f"/orders/{order.pk}"
        if recipient_ids is None:
            notify_supplier_users(
                order.supplier_id, title, content, link, NotificationType.ORDER, sink=self.notifier,
            )
            return
        dispatch_after_commit(
            self.notifier,
            recipient_ids,
            NotificationEvent(title=title, content=content, link=link, notification_type=NotificationType.ORDER),
        )

    # ── create ───────────────────────────────────────────────────────────────

    def create_order(self, supplier_id, material_id, quantity, unit_price=None,
                     delivery_date=None, notes=''):
        """
        Create a pending order and its 'created' log entry.

        Raises:
            Forbidden: actor is not a purchaser/admin
            ValidationFailed: missing or malformed input
            SupplierInactive: supplier missing or not active
            MaterialNotFound: material missing
            DuplicateOrderNumber: every generated number collided
        """
        self._require_purchasing('create')

        if not supplier_id or not material_id:
            raise ValidationFailed("Supplier, material and quantity are required.")
        quantity = parse_amount(quantity, 'quantity')
        unit_price = parse_amount(unit_price, 'unit_price', required=False, allow_zero=True)
        delivery_date = parse_optional_date(delivery_date)

        if not is_supplier_active(supplier_id):
            raise SupplierInactive(f"Supplier {supplier_id} does not exist or is not active.")
        if not material_exists(material_id):
            raise MaterialNotFound(f"Material {material_id} does not exist.")

        now = self.clock()

        def insert(order_number):
            order = Order.objects.create(
                order_number=order_number,
                supplier_id=supplier_id,
                material_id=material_id,
                quantity=quantity,
                unit_price=unit_price,
                delivery_date=delivery_date,
                notes=notes or '',
                status=OrderStatus.PENDING,
                created_by=self.user,
            )
            # auto_now fields ignore assigned values
            Order.objects.filter(pk=order.pk).update(created_at=now, updated_at=now)
            order.created_at = order.updated_at = now
            self._write_log(order, OrderAction.CREATED, None, OrderStatus.PENDING, 'Order created', now)
            return order

        with transaction.atomic():
            order = create_numbered(
                Order,
                'order_number',
                ORDER_NUMBER_PREFIX,
                insert,
                when=now,
                suffix_generator=self.suffix_generator,
                attempts=getattr(settings, 'SRM_ORDER_NUMBER_ATTEMPTS', 5),
                error_class=DuplicateOrderNumber,
            )
            self._notify(
                order,
                'New purchase order',
                f"Order {order.order_number} is waiting for your confirmation.",
            )

        logger.info(f"Order {order.order_number} created by {self.user} (total={order.total_amount})")
        return order

    # ── transitions ──────────────────────────────────────────────────────────

    def _transition(self, order_id, action, remark, **fields):
        """
        Apply workflow ``action`` to an order.

        Extra ``fields`` are written in the same conditional UPDATE as the
        status change.
        """
        with transaction.atomic():
            order = self._lock_order(order_id)
            transition = ORDER_WORKFLOW.get(action)
            self._check_actor(order, transition)
            if order.is_terminal:
                raise OrderTerminal(order, action)

            old_status = order.status
            now = self.clock()
            ORDER_WORKFLOW.apply(order, action, updated_at=now, **fields)

            self._write_log(order, LOG_ACTIONS[action], old_status, transition.target, remark, now)
            self._notify_transition(order, action)

        logger.info(f"Order {order.order_number} {action}: {old_status} -> {order.status} by {self.user}")
        return order

    def _notify_transition(self, order, action):
        label = order.get_status_display()
        content = f"Order {order.order_number} is now {label.lower()}."
        if action in ('confirm', 'ship'):
            self._notify(order, f"Order {label.lower()} by supplier", content, recipient_ids=[order.created_by_id])
        else:
            self._notify(order, f"Order {label.lower()}", content)

    def confirm_order(self, order_id):
        """Supplier accepts a pending order."""
        return self._transition(order_id, 'confirm', 'Supplier confirmed the order')

    def ship_order(self, order_id, tracking_no=None):
        """Supplier ships a confirmed order, optionally recording a tracking number."""
        tracking_no = (tracking_no or '').strip()
        if len(tracking_no) > Order._meta.get_field('tracking_no').max_length:
            raise ValidationFailed("tracking_no is too long.")
        remark = f"Shipped, tracking number: {tracking_no}" if tracking_no else 'Shipped'
        return self._transition(order_id, 'ship', remark, tracking_no=tracking_no)

    def receive_order(self, order_id):
        return self._transition(order_id, 'receive', 'Goods received')

    def complete_order(self, order_id):
        return self._transition(order_id, 'complete', 'Order completed')

    def cancel_order(self, order_id, reason=''):
        remark = f"Order cancelled: {reason}" if reason else 'Order cancelled'
        return self._transition(order_id, 'cancel', remark)

    # ── field edits ──────────────────────────────────────────────────────────

    def update_order(self, order_id, **fields):
        """
        Edit quantity, unit_price, delivery_date or notes.

        Status is unchanged and no OrderLog entry is written; the change is
        captured in Order.history. total_amount is recomputed on save.
        """
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationFailed(f"Cannot edit order fields: {', '.join(sorted(unknown))}")

        with transaction.atomic():
            order = self._lock_order(order_id)
            self._require_purchasing('update')
            if order.is_terminal:
                raise OrderTerminal(order, 'update')

            if 'quantity' in fields:
                order.quantity = parse_amount(fields['quantity'], 'quantity')
            if 'unit_price' in fields:
                order.unit_price = parse_amount(fields['unit_price'], 'unit_price',
                                                required=False, allow_zero=True)
            if 'delivery_date' in fields:
                order.delivery_date = parse_optional_date(fields['delivery_date'])
            if 'notes' in fields:
                order.notes = fields['notes'] or ''

            if fields:
                order.save()
                now = self.clock()
                Order.objects.filter(pk=order.pk).update(updated_at=now)
                order.updated_at = now

        logger.info(f"Order {order.order_number} edited by {self.user}: {', '.join(sorted(fields))}")
        return order

    # ── queries ──────────────────────────────────────────────────────────────

    def get_order(self, order_id):
        """Return the order with its logs prefetched in timeline order."""
        order = self._get_order(order_id)
        self._check_visible(order)
        order.timeline = list(order.logs.select_related('operator'))
        return order

    def get_timeline(self, order_id):
        order = self._get_order(order_id)
        self._check_visible(order)
        return list(order.logs.select_related('operator'))

    def list_orders(self, status=None, supplier_id=None, start_date=None, end_date=None,
                    search=None, page=1, page_size=20):
        """
        Filtered, newest-first page of orders.

        Supplier users only ever see their own supplier's orders, whatever
        supplier_id they pass. The date range applies to delivery_date.
        """
        qs = Order.objects.select_related('supplier', 'material', 'created_by')

        if getattr(self.user, 'is_supplier_user', False):
            qs = qs.filter(supplier_id=self.user.supplier_id)
        elif supplier_id:
            qs = qs.filter(supplier_id=supplier_id)

        if status:
            if status not in OrderStatus.values:
                raise ValidationFailed(f"Unknown order status '{status}'.")
            qs = qs.filter(status=status)
        start_date = parse_optional_date(start_date, 'start_date')
        end_date = parse_optional_date(end_date, 'end_date')
        if start_date:
            qs = qs.filter(delivery_date__gte=start_date)
        if end_date:
            qs = qs.filter(delivery_date__lte=end_date)
        if search:
            qs = qs.filter(
                Q(order_number__icontains=search)
                | Q(supplier__name__icontains=search)
                | Q(material__name__icontains=search)
            )

        try:
            page = max(int(page or 1), 1)
            page_size = min(max(int(page_size or 20), 1), MAX_PAGE_SIZE)
        except (TypeError, ValueError):
            raise ValidationFailed("page and page_size must be integers.") from None

        total = qs.count()
        offset = (page - 1) * page_size
        items = list(qs.order_by('-created_at', '-id')[offset:offset + page_size])
        return OrderPage(items=items, total=total, page=page, page_size=page_size)
