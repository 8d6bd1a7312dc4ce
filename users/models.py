from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    ADMIN = 'admin', 'Administrator'
    PURCHASER = 'purchaser', 'Purchaser'
    SUPPLIER = 'supplier', 'Supplier'
    FINANCE = 'finance', 'Finance'


# Roles that act for the purchasing organisation
PURCHASING_ROLES = frozenset({Role.ADMIN, Role.PURCHASER})
FINANCE_ROLES = frozenset({Role.ADMIN, Role.PURCHASER, Role.FINANCE})


class User(AbstractUser):
    """
    Custom User Model inheriting from AbstractUser for flexibility.

    Supplier users belong to exactly one Supplier and only ever see that
    supplier's orders, quotations, reconciliations and invoices.
    """

    name = models.CharField(max_length=255, blank=True)
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.PURCHASER,
        help_text="Portal role; drives what the user may do"
    )
    supplier = models.ForeignKey(
        'suppliers.Supplier',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='users',
        help_text="Affiliated supplier (supplier role only)"
    )
    phone = models.CharField(max_length=20, blank=True)

    def __str__(self):
        return self.name or self.username

    @property
    def is_purchasing(self):
        return self.role in PURCHASING_ROLES

    @property
    def is_finance(self):
        return self.role in FINANCE_ROLES

    @property
    def is_supplier_user(self):
        return self.role == Role.SUPPLIER

    def owns_supplier(self, supplier_id):
        """True when this is a supplier user affiliated with ``supplier_id``."""
        return self.is_supplier_user and self.supplier_id is not None and self.supplier_id == supplier_id
