# apps/sourcing/models.py
"""
Sourcing models: requests for quotation and supplier replies.

Models:
- Inquiry: An RFQ published to suppliers (draft -> published -> closed)
- Quotation: One supplier's price offer against an inquiry
  (pending -> accepted | rejected). Accepting creates a purchase order.
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from shared.models import TimestampMixin
from shared.workflow import Transition, TransitionTable
from users.models import PURCHASING_ROLES, Role


class InquiryStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    PUBLISHED = 'published', 'Published'
    CLOSED = 'closed', 'Closed'


INQUIRY_WORKFLOW = TransitionTable(
    InquiryStatus,
    transitions=[
        Transition('publish', {InquiryStatus.DRAFT}, InquiryStatus.PUBLISHED, PURCHASING_ROLES),
        Transition('close', {InquiryStatus.PUBLISHED}, InquiryStatus.CLOSED, PURCHASING_ROLES),
    ],
    terminal={InquiryStatus.CLOSED},
)


class QuotationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    REJECTED = 'rejected', 'Rejected'


QUOTATION_WORKFLOW = TransitionTable(
    QuotationStatus,
    transitions=[
        Transition('accept', {QuotationStatus.PENDING}, QuotationStatus.ACCEPTED, PURCHASING_ROLES),
        Transition('reject', {QuotationStatus.PENDING}, QuotationStatus.REJECTED, PURCHASING_ROLES),
    ],
    terminal={QuotationStatus.ACCEPTED, QuotationStatus.REJECTED},
)

# Only suppliers answer inquiries
QUOTING_ROLES = frozenset({Role.SUPPLIER})


class Inquiry(TimestampMixin):
    """
    Request for Quotation sent to all active suppliers.
    """
    inquiry_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="IQ + yyyymm + 4-digit suffix"
    )
    title = models.CharField(
        max_length=200,
        help_text="Short description of what is being sourced"
    )
    description = models.TextField(
        blank=True,
        help_text="Requirements, quantities, quality level"
    )
    deadline = models.DateField(
        null=True,
        blank=True,
        help_text="Date by which quotations are due"
    )
    status = models.CharField(
        max_length=20,
        choices=InquiryStatus.choices,
        default=InquiryStatus.DRAFT,
        db_index=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='inquiries',
    )

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'inquiries'

    def __str__(self):
        return f"{self.inquiry_number} - {self.title}"


class Quotation(TimestampMixin):
    """
    A supplier's offer against a published inquiry.

    One quotation per (inquiry, supplier).
    """
    inquiry = models.ForeignKey(
        Inquiry,
        on_delete=models.CASCADE,
        related_name='quotations',
    )
    supplier = models.ForeignKey(
        'suppliers.Supplier',
        on_delete=models.PROTECT,
        related_name='quotations',
    )
    material = models.ForeignKey(
        'materials.Material',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='quotations',
        help_text="Material quoted (required before the quotation can be accepted)"
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
    )
    delivery_days = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Lead time in days from acceptance"
    )
    valid_until = models.DateField(
        null=True,
        blank=True,
        help_text="Offer expiry date"
    )
    status = models.CharField(
        max_length=20,
        choices=QuotationStatus.choices,
        default=QuotationStatus.PENDING,
        db_index=True,
    )
    reject_reason = models.TextField(blank=True)
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='quotations',
    )
    order = models.OneToOneField(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='source_quotation',
        help_text="Purchase order created when this quotation was accepted"
    )

    class Meta:
        ordering = ['unit_price', 'created_at']
        constraints = [
            models.UniqueConstraint(fields=['inquiry', 'supplier'], name='unique_quotation_per_supplier'),
        ]

    def __str__(self):
        return f"{self.supplier} @ {self.unit_price} for {self.inquiry.inquiry_number}"
