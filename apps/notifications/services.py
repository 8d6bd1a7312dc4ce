# apps/notifications/services.py
"""
In-app notification sink.

Business services never write Notification rows inside their own
transaction. They build a NotificationEvent and hand it to
dispatch_after_commit(), which delivers it once the surrounding
transaction commits. Delivery failures are logged and never propagate.
"""
import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.db import transaction

from .models import Notification, NotificationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationEvent:
    """What to tell a user; recipients are resolved by the caller."""
    title: str
    content: str = ''
    link: str = ''
    notification_type: str = NotificationType.SYSTEM


def notify_user(recipient, title, content='', link='', notification_type=NotificationType.SYSTEM):
    """Create a notification for a single user (instance or primary key)."""
    return Notification.objects.create(
        recipient_id=getattr(recipient, 'pk', recipient),
        title=title,
        content=content,
        link=link,
        notification_type=notification_type,
    )


def supplier_user_ids(supplier_id):
    """IDs of the active portal users affiliated with a supplier."""
    User = get_user_model()
    return list(
        User.objects.filter(supplier_id=supplier_id, is_active=True).values_list('pk', flat=True)
    )


def notify_supplier_users(supplier_id, title, content='', link='', notification_type=NotificationType.SYSTEM,
                          sink=None):
    """Notify every active user of a supplier once the current transaction commits."""
    dispatch_after_commit(
        sink,
        supplier_user_ids(supplier_id),
        NotificationEvent(title=title, content=content, link=link, notification_type=notification_type),
    )


class DatabaseNotificationSink:
    """Default sink: one Notification row per recipient."""

    def notify(self, user_id, event):
        return notify_user(user_id, event.title, event.content, event.link, event.notification_type)


default_sink = DatabaseNotificationSink()


def deliver(sink, recipient_ids, event):
    """Send ``event`` to each recipient; a failing recipient does not stop the rest."""
    for user_id in recipient_ids:
        try:
            sink.notify(user_id, event)
        except Exception:
            logger.exception(f"Notification '{event.title}' to user {user_id} failed")


def dispatch_after_commit(sink, recipient_ids, event):
    """Schedule delivery for when the current transaction commits."""
    recipient_ids = [user_id for user_id in dict.fromkeys(recipient_ids) if user_id is not None]
    if not recipient_ids:
        return
    transaction.on_commit(lambda: deliver(sink or default_sink, recipient_ids, event))


def unread_count(user):
    return Notification.objects.filter(recipient=user, is_read=False).count()


def mark_read(user, notification_id):
    """Mark one of ``user``'s notifications read. Returns the number updated."""
    return Notification.objects.filter(recipient=user, pk=notification_id).update(is_read=True)


def mark_all_read(user):
    return Notification.objects.filter(recipient=user, is_read=False).update(is_read=True)
