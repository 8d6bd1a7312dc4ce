# apps/notifications/tests/test_services.py
from unittest import mock

from django.test import TestCase

from apps.notifications.models import Notification, NotificationType
from apps.notifications.services import (
    NotificationEvent, dispatch_after_commit, mark_all_read, mark_read,
    notify_supplier_users, notify_user, unread_count,
)
from apps.suppliers.models import Supplier
from users.models import Role, User


class NotificationServiceTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.supplier = Supplier.objects.create(name='Acme Machining')
        cls.rep = User.objects.create_user(username='acme1', password='pass', role=Role.SUPPLIER, supplier=cls.supplier)
        cls.rep2 = User.objects.create_user(username='acme2', password='pass', role=Role.SUPPLIER, supplier=cls.supplier)
        cls.former = User.objects.create_user(
            username='acme3', password='pass', role=Role.SUPPLIER, supplier=cls.supplier, is_active=False,
        )
        cls.buyer = User.objects.create_user(username='buyer', password='pass', role=Role.PURCHASER)

    def test_notify_user(self):
        notification = notify_user(self.buyer, 'Hello', content='World', notification_type=NotificationType.ORDER)
        self.assertEqual(notification.recipient, self.buyer)
        self.assertFalse(notification.is_read)

    def test_notify_user_accepts_primary_key(self):
        notification = notify_user(self.buyer.pk, 'Hello')
        self.assertEqual(notification.recipient, self.buyer)

    def test_notify_supplier_users_skips_inactive_accounts(self):
        with self.captureOnCommitCallbacks(execute=True):
            notify_supplier_users(self.supplier.pk, 'Heads up', notification_type=NotificationType.INVOICE)

        self.assertEqual(
            set(Notification.objects.values_list('recipient_id', flat=True)), {self.rep.pk, self.rep2.pk},
        )
        self.assertFalse(Notification.objects.filter(recipient=self.former).exists())

    def test_notify_supplier_users_waits_for_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            notify_supplier_users(self.supplier.pk, 'Heads up')
        self.assertEqual(len(callbacks), 1)
        self.assertFalse(Notification.objects.exists())

    def test_notify_supplier_users_uses_given_sink(self):
        sink = mock.Mock()
        with self.captureOnCommitCallbacks(execute=True):
            notify_supplier_users(self.supplier.pk, 'Heads up', sink=sink)

        self.assertEqual(sink.notify.call_count, 2)
        self.assertFalse(Notification.objects.exists())

    def test_unread_and_mark_read(self):
        first = notify_user(self.buyer, 'One')
        notify_user(self.buyer, 'Two')
        notify_user(self.rep, 'Not yours')
        self.assertEqual(unread_count(self.buyer), 2)

        self.assertEqual(mark_read(self.buyer, first.pk), 1)
        self.assertEqual(unread_count(self.buyer), 1)
        self.assertEqual(mark_all_read(self.buyer), 1)
        self.assertEqual(unread_count(self.buyer), 0)
        self.assertEqual(unread_count(self.rep), 1)

    def test_mark_read_ignores_other_users_notifications(self):
        theirs = notify_user(self.rep, 'Private')
        self.assertEqual(mark_read(self.buyer, theirs.pk), 0)
        theirs.refresh_from_db()
        self.assertFalse(theirs.is_read)

    def test_dispatch_waits_for_commit(self):
        event = NotificationEvent(title='Order confirmed')
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            dispatch_after_commit(None, [self.buyer.pk], event)
        self.assertEqual(len(callbacks), 1)
        self.assertFalse(Notification.objects.exists())

        callbacks[0]()
        self.assertEqual(Notification.objects.get().title, 'Order confirmed')

    def test_dispatch_deduplicates_and_drops_missing_recipients(self):
        sink = mock.Mock()
        with self.captureOnCommitCallbacks(execute=True):
            dispatch_after_commit(sink, [self.buyer.pk, None, self.buyer.pk, self.rep.pk], NotificationEvent('x'))
        self.assertEqual([c.args[0] for c in sink.notify.call_args_list], [self.buyer.pk, self.rep.pk])

    def test_failing_recipient_does_not_stop_others(self):
        sink = mock.Mock()
        sink.notify.side_effect = [RuntimeError('boom'), None]
        with self.assertLogs('apps.notifications.services', level='ERROR') as logs:
            with self.captureOnCommitCallbacks(execute=True):
                dispatch_after_commit(sink, [self.buyer.pk, self.rep.pk], NotificationEvent('x'))
        self.assertEqual(sink.notify.call_count, 2)
        self.assertIn('failed', logs.output[0])

    def test_no_recipients_schedules_nothing(self):
        with self.captureOnCommitCallbacks() as callbacks:
            dispatch_after_commit(None, [None], NotificationEvent('x'))
        self.assertEqual(callbacks, [])
