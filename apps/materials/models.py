# apps/materials/models.py
"""
Material catalog.

Materials are the things we buy. Each purchase order line is for exactly
one material; quotations may reference one.
"""
from django.db import models
from shared.models import TimestampMixin


class Material(TimestampMixin):
    """
    A purchasable material identified by an internal code.
    """
    code = models.CharField(
        max_length=50,
        unique=True,
        help_text="Internal material code (unique)"
    )
    name = models.CharField(
        max_length=100,
        help_text="Material name"
    )
    specification = models.TextField(
        blank=True,
        help_text="Technical specification"
    )
    unit = models.CharField(
        max_length=20,
        blank=True,
        help_text="Unit of measure (pcs, kg, m...)"
    )
    category = models.CharField(
        max_length=50,
        blank=True,
        help_text="Catalog category"
    )

    class Meta:
        ordering = ['code']
        indexes = [
            models.Index(fields=['category'], name='materials_m_categor_5b7d2e_idx'),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"


def material_exists(material_id):
    """Registry check used before creating orders."""
    return Material.objects.filter(pk=material_id).exists()
