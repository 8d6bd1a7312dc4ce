from django.db import models
from django.conf import settings
from shared.models import TimestampMixin


class NotificationType(models.TextChoices):
    ORDER = 'order', 'Order'
    RECONCILIATION = 'reconciliation', 'Reconciliation'
    INQUIRY = 'inquiry', 'Inquiry'
    INVOICE = 'invoice', 'Invoice'
    SYSTEM = 'system', 'System'


class Notification(TimestampMixin):
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    notification_type = models.CharField(
        max_length=20,
        choices=NotificationType.choices,
        default=NotificationType.SYSTEM,
    )
    title = models.CharField(max_length=200)
    content = models.TextField(blank=True)
    link = models.CharField(max_length=500, blank=True)
    is_read = models.BooleanField(default=False)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['recipient', '-created_at'], name='notif_recipient_created_idx'),
            models.Index(fields=['recipient', 'is_read'], name='notif_recipient_read_idx'),
        ]

    def __str__(self):
        return f"{self.title} -> {self.recipient.username}"
