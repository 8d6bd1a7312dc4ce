# apps/invoicing/models.py
"""
Supplier settlement models.

Models:
- Reconciliation: Statement of delivered orders for a supplier over a period
  (draft -> sent -> confirmed -> paid)
- Invoice: Supplier-issued invoice awaiting verification
  (pending -> verified | rejected)
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from shared.models import TimestampMixin
from shared.workflow import Transition, TransitionTable
from users.models import FINANCE_ROLES, Role


class ReconciliationStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    SENT = 'sent', 'Sent to Supplier'
    CONFIRMED = 'confirmed', 'Confirmed by Supplier'
    PAID = 'paid', 'Paid'


RECONCILIATION_WORKFLOW = TransitionTable(
    ReconciliationStatus,
    transitions=[
        Transition('send', {ReconciliationStatus.DRAFT}, ReconciliationStatus.SENT, FINANCE_ROLES),
        Transition('confirm', {ReconciliationStatus.SENT}, ReconciliationStatus.CONFIRMED,
                   {Role.SUPPLIER}, owner_only=True),
        Transition('pay', {ReconciliationStatus.CONFIRMED}, ReconciliationStatus.PAID, FINANCE_ROLES),
    ],
    terminal={ReconciliationStatus.PAID},
)


class InvoiceStatus(models.TextChoices):
    PENDING = 'pending', 'Pending Verification'
    VERIFIED = 'verified', 'Verified'
    REJECTED = 'rejected', 'Rejected'


INVOICE_WORKFLOW = TransitionTable(
    InvoiceStatus,
    transitions=[
        Transition('verify', {InvoiceStatus.PENDING}, InvoiceStatus.VERIFIED, FINANCE_ROLES),
        Transition('reject', {InvoiceStatus.PENDING}, InvoiceStatus.REJECTED, FINANCE_ROLES),
    ],
    terminal={InvoiceStatus.VERIFIED, InvoiceStatus.REJECTED},
)


class Reconciliation(TimestampMixin):
    """
    Periodic statement of what we owe a supplier.

    total_amount is the sum of the supplier's received/completed orders
    whose delivery_date falls inside [period_start, period_end].
    """
    reconciliation_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="RC + yyyymm + 4-digit suffix"
    )
    supplier = models.ForeignKey(
        'suppliers.Supplier',
        on_delete=models.PROTECT,
        related_name='reconciliations',
    )
    period_start = models.DateField(help_text="First delivery date covered")
    period_end = models.DateField(help_text="Last delivery date covered")
    total_amount = models.DecimalField(
        max_digits=26,
        decimal_places=4,
        default=Decimal('0'),
        help_text="Sum of delivered order totals in the period"
    )
    status = models.CharField(
        max_length=20,
        choices=ReconciliationStatus.choices,
        default=ReconciliationStatus.DRAFT,
        db_index=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reconciliations',
    )

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.reconciliation_number} ({self.supplier})"


class Invoice(TimestampMixin):
    """
    Invoice uploaded by a supplier.

    May be linked to the reconciliation it settles.
    """
    supplier = models.ForeignKey(
        'suppliers.Supplier',
        on_delete=models.PROTECT,
        related_name='invoices',
    )
    reconciliation = models.ForeignKey(
        Reconciliation,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invoices',
    )
    invoice_no = models.CharField(
        max_length=50,
        help_text="Supplier's invoice number"
    )
    invoice_date = models.DateField(null=True, blank=True)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
    )
    tax_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
    )
    image_url = models.CharField(
        max_length=500,
        blank=True,
        help_text="Location of the scanned invoice"
    )
    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.PENDING,
        db_index=True,
    )
    reject_reason = models.TextField(blank=True)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='uploaded_invoices',
    )

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Invoice {self.invoice_no} ({self.supplier})"
