# apps/suppliers/services.py
"""
Supplier registry operations.

SupplierService handles:
- Creating and editing suppliers (name must stay unique)
- Blocking / activating a supplier
- Rating a supplier (0.0 - 5.0)
- Order statistics for the supplier detail page
"""
import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.db.models import Count, Q

from shared.exceptions import NotFound, ValidationFailed

from .models import SUPPLIER_WORKFLOW, Supplier, SupplierStatus

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'contact_name', 'contact_phone', 'address')


def is_supplier_active(supplier_id):
    """Registry check used before creating orders."""
    return Supplier.objects.filter(pk=supplier_id, status=SupplierStatus.ACTIVE).exists()


class SupplierService:
    """
    Service for supplier master data.

    Usage:
        service = SupplierService(user)
        supplier = service.create_supplier(name='Acme Machining')
        service.block_supplier(supplier.pk)
    """

    RATING_MIN = Decimal('0')
    RATING_MAX = Decimal('5')

    def __init__(self, user=None):
        self.user = user

    def _get(self, supplier_id, lock=False):
        qs = Supplier.objects.select_for_update() if lock else Supplier.objects
        try:
            return qs.get(pk=supplier_id)
        except Supplier.DoesNotExist:
            raise NotFound(f"Supplier {supplier_id} does not exist.") from None

    def _check_name(self, name, exclude_pk=None):
        name = (name or '').strip()
        if not name:
            raise ValidationFailed("Supplier name is required.")
        qs = Supplier.objects.filter(name=name)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise ValidationFailed(f"Supplier name '{name}' already exists.")
        return name

    def create_supplier(self, name, contact_name='', contact_phone='', address=''):
        name = self._check_name(name)
        supplier = Supplier.objects.create(
            name=name,
            contact_name=contact_name or '',
            contact_phone=contact_phone or '',
            address=address or '',
        )
        logger.info(f"Supplier created: {supplier.name} (id={supplier.pk})")
        return supplier

    @transaction.atomic
    def update_supplier(self, supplier_id, **fields):
        """Update contact details. Unknown fields raise ValidationFailed."""
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationFailed(f"Cannot edit supplier fields: {', '.join(sorted(unknown))}")

        supplier = self._get(supplier_id, lock=True)
        if 'name' in fields and fields['name'] != supplier.name:
            fields['name'] = self._check_name(fields['name'], exclude_pk=supplier.pk)
        for field_name, value in fields.items():
            setattr(supplier, field_name, value if value is not None else '')
        if fields:
            supplier.save(update_fields=list(fields) + ['updated_at'])
        return supplier

    @transaction.atomic
    def _set_status(self, supplier_id, action):
        supplier = self._get(supplier_id, lock=True)
        old_status = supplier.status
        SUPPLIER_WORKFLOW.apply(supplier, action)
        logger.info(f"Supplier {supplier.pk} {action}: {old_status} -> {supplier.status}")
        return supplier

    def block_supplier(self, supplier_id):
        return self._set_status(supplier_id, 'block')

    def activate_supplier(self, supplier_id):
        return self._set_status(supplier_id, 'activate')

    @transaction.atomic
    def rate_supplier(self, supplier_id, rating):
        try:
            rating = Decimal(str(rating))
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationFailed("Rating must be a number.") from None
        if not rating.is_finite() or not self.RATING_MIN <= rating <= self.RATING_MAX:
            raise ValidationFailed("Rating must be between 0 and 5.")

        supplier = self._get(supplier_id, lock=True)
        supplier.rating = rating.quantize(Decimal('0.1'))
        supplier.save(update_fields=['rating', 'updated_at'])
        return supplier

    def order_stats(self, supplier_id):
        """Return total / pending / completed order counts for a supplier."""
        from apps.orders.models import Order, OrderStatus

        supplier = self._get(supplier_id)
        return Order.objects.filter(supplier=supplier).aggregate(
            total_orders=Count('id'),
            pending=Count('id', filter=Q(status=OrderStatus.PENDING)),
            completed=Count('id', filter=Q(status=OrderStatus.COMPLETED)),
        )
