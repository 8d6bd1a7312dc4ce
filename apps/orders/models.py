# apps/orders/models.py
"""
Purchase order models.

Models:
- Order: One purchase commitment to a supplier for a material
- OrderLog: Append-only audit trail, one row per status transition

The legal status graph lives in ORDER_WORKFLOW and is checked at import.
Status, tracking_no and every OrderLog row are written only through
apps.orders.services.OrderService.
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from simple_history.models import HistoricalRecords

from shared.models import AppendOnlyModel, TimestampMixin
from shared.workflow import Transition, TransitionTable
from users.models import PURCHASING_ROLES, Role


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending Confirmation'
    CONFIRMED = 'confirmed', 'Confirmed'
    SHIPPED = 'shipped', 'Shipped'
    RECEIVED = 'received', 'Received'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class OrderAction(models.TextChoices):
    """Tags written to OrderLog.action."""
    CREATED = 'created', 'Created'
    CONFIRMED = 'confirmed', 'Confirmed'
    SHIPPED = 'shipped', 'Shipped'
    RECEIVED = 'received', 'Received'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


ORDER_WORKFLOW = TransitionTable(
    OrderStatus,
    transitions=[
        Transition('confirm', {OrderStatus.PENDING}, OrderStatus.CONFIRMED,
                   {Role.SUPPLIER}, owner_only=True),
        Transition('ship', {OrderStatus.CONFIRMED}, OrderStatus.SHIPPED,
                   {Role.SUPPLIER}, owner_only=True),
        Transition('receive', {OrderStatus.SHIPPED}, OrderStatus.RECEIVED, PURCHASING_ROLES),
        Transition('complete', {OrderStatus.RECEIVED}, OrderStatus.COMPLETED, PURCHASING_ROLES),
        Transition('cancel', {OrderStatus.PENDING, OrderStatus.CONFIRMED}, OrderStatus.CANCELLED,
                   PURCHASING_ROLES),
    ],
    terminal={OrderStatus.COMPLETED, OrderStatus.CANCELLED},
)

# Log tag written for each workflow action
LOG_ACTIONS = {
    'confirm': OrderAction.CONFIRMED,
    'ship': OrderAction.SHIPPED,
    'receive': OrderAction.RECEIVED,
    'complete': OrderAction.COMPLETED,
    'cancel': OrderAction.CANCELLED,
}

# Statuses counted as delivered for reconciliation
DELIVERED_STATUSES = (OrderStatus.RECEIVED, OrderStatus.COMPLETED)


def compute_total(quantity, unit_price):
    """quantity * unit_price, treating a missing price as zero."""
    return Decimal(quantity) * (Decimal(unit_price) if unit_price is not None else Decimal('0'))


class Order(TimestampMixin):
    """
    Purchase Order sent to a supplier.

    total_amount is derived on every save and stored with four decimal
    places so quantity (2dp) x unit_price (2dp) is kept exactly.
    Field edits are tracked by django-simple-history; status changes are
    tracked by OrderLog.
    """
    order_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="PO + yyyymm + 4-digit suffix"
    )
    supplier = models.ForeignKey(
        'suppliers.Supplier',
        on_delete=models.PROTECT,
        related_name='orders',
        help_text="Supplier fulfilling this order"
    )
    material = models.ForeignKey(
        'materials.Material',
        on_delete=models.PROTECT,
        related_name='orders',
        help_text="Material being purchased"
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text="Quantity ordered (must be positive)"
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Price per unit (optional until quoted)"
    )
    total_amount = models.DecimalField(
        max_digits=26,
        decimal_places=4,
        default=Decimal('0'),
        help_text="Derived: quantity x unit_price"
    )
    delivery_date = models.DateField(
        null=True,
        blank=True,
        help_text="Requested delivery date"
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
        help_text="Lifecycle status"
    )
    tracking_no = models.CharField(
        max_length=50,
        blank=True,
        help_text="Carrier tracking number, set when shipped"
    )
    notes = models.TextField(
        blank=True,
        help_text="Order notes"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_orders',
        help_text="Purchaser who placed the order"
    )

    history = HistoricalRecords()

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['supplier', 'status'], name='orders_supplier_status_idx'),
            models.Index(fields=['delivery_date'], name='orders_delivery_date_idx'),
        ]

    def __str__(self):
        return f"PO {self.order_number}"

    def save(self, *args, **kwargs):
        self.total_amount = compute_total(self.quantity, self.unit_price)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and ('quantity' in update_fields or 'unit_price' in update_fields):
            kwargs['update_fields'] = set(update_fields) | {'total_amount'}
        super().save(*args, **kwargs)

    @property
    def is_terminal(self):
        return ORDER_WORKFLOW.is_terminal(self.status)

    @property
    def allowed_actions(self):
        return ORDER_WORKFLOW.allowed_actions(self.status)


class OrderLog(AppendOnlyModel):
    """
    One row per successful order transition, including creation.

    Rows are never updated or deleted. Ordering by (created_at, id)
    reconstructs the full status path starting at (None, 'pending').
    """
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='logs',
        help_text="Order this entry belongs to"
    )
    action = models.CharField(
        max_length=20,
        choices=OrderAction.choices,
        help_text="Transition name"
    )
    old_status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
        help_text="Status before the transition (null only for 'created')"
    )
    new_status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        help_text="Status after the transition"
    )
    operator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_logs',
        help_text="User who triggered the transition"
    )
    remark = models.TextField(
        blank=True,
        help_text="Free-text remark"
    )
    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the transition happened"
    )

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.order_id}: {self.old_status or '-'} -> {self.new_status} ({self.action})"
