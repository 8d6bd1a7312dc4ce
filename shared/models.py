# shared/models.py
"""
Abstract base models for the entire application.

TimestampMixin: Adds created_at and updated_at timestamps
AppendOnlyModel: Rows can be inserted but never changed or removed
"""
from django.db import models
from .managers import AppendOnlyManager, ImmutableRecordError


class TimestampMixin(models.Model):
    """
    Abstract base model that adds timestamp tracking.

    Provides:
    - created_at: Set once when record is created
    - updated_at: Updated every time record is saved
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AppendOnlyModel(models.Model):
    """
    Abstract base model for audit records.

    Instances may be saved exactly once. Updating or deleting an existing
    row (through the instance or the manager) raises ImmutableRecordError.

    Example:
        class OrderLog(AppendOnlyModel):
            remark = models.TextField(blank=True)

        OrderLog.objects.create(remark='created')   # OK
        OrderLog.objects.all().delete()             # ImmutableRecordError
    """
    objects = AppendOnlyManager()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError(f"{self.__class__.__name__} records cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError(f"{self.__class__.__name__} records cannot be deleted.")
