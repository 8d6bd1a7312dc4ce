# apps/suppliers/models.py
"""
Supplier master data.

A Supplier is the company on the other side of every purchase order,
quotation, reconciliation and invoice. Supplier users (User.role='supplier')
are affiliated with exactly one Supplier and can only see that supplier's
documents.
"""
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from shared.models import TimestampMixin
from shared.workflow import Transition, TransitionTable


class SupplierStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    BLOCKED = 'blocked', 'Blocked'
    PENDING = 'pending', 'Pending Review'


SUPPLIER_WORKFLOW = TransitionTable(
    SupplierStatus,
    transitions=[
        Transition('block', {SupplierStatus.ACTIVE, SupplierStatus.PENDING}, SupplierStatus.BLOCKED),
        Transition('activate', {SupplierStatus.BLOCKED, SupplierStatus.PENDING}, SupplierStatus.ACTIVE),
    ],
)


class Supplier(TimestampMixin):
    """
    A company we buy materials from.

    Only ACTIVE suppliers can receive new purchase orders.
    """
    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Supplier company name (unique)"
    )
    contact_name = models.CharField(
        max_length=50,
        blank=True,
        help_text="Primary contact person"
    )
    contact_phone = models.CharField(
        max_length=20,
        blank=True,
        help_text="Primary contact phone"
    )
    address = models.TextField(
        blank=True,
        help_text="Business address"
    )
    status = models.CharField(
        max_length=20,
        choices=SupplierStatus.choices,
        default=SupplierStatus.ACTIVE,
        help_text="Blocked suppliers cannot receive new orders"
    )
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=Decimal('5.0'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('5'))],
        help_text="Performance rating from 0.0 to 5.0"
    )

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='suppliers_s_status_0c1e5a_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def is_active(self):
        return self.status == SupplierStatus.ACTIVE
