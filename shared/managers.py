# shared/managers.py
"""
Append-only manager for audit tables.

Blocks bulk UPDATE and DELETE at the queryset level so history rows can only
ever grow. Cascading deletes from a parent row go through the collector and
are not blocked here.
"""
from django.db import models


class ImmutableRecordError(Exception):
    """Raised on any attempt to change or remove an append-only row."""
    pass


class AppendOnlyQuerySet(models.QuerySet):
    """QuerySet that refuses bulk mutation."""

    def update(self, **kwargs):
        raise ImmutableRecordError(f"{self.model.__name__} records cannot be modified.")

    def delete(self):
        raise ImmutableRecordError(f"{self.model.__name__} records cannot be deleted.")

    def bulk_update(self, objs, fields, batch_size=None):
        raise ImmutableRecordError(f"{self.model.__name__} records cannot be modified.")


class AppendOnlyManager(models.Manager.from_queryset(AppendOnlyQuerySet)):
    """
    Default manager for AppendOnlyModel subclasses.

    Usage:
        OrderLog.objects.create(...)        # allowed
        OrderLog.objects.filter(...)        # allowed
        OrderLog.objects.filter(...).update(remark='x')  # ImmutableRecordError
    """
    pass
