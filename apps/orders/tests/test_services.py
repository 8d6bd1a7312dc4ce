# apps/orders/tests/test_services.py
"""
Tests for OrderService: creation, transitions, field edits and numbering.
"""
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

from django.test import TestCase, override_settings

from apps.materials.models import Material
from apps.notifications.models import Notification
from apps.orders.models import Order, OrderLog, OrderStatus, compute_total
from apps.orders.services import (
    DuplicateOrderNumber, MaterialNotFound, OrderService, OrderTerminal, SupplierInactive,
)
from apps.suppliers.models import Supplier, SupplierStatus
from shared.exceptions import Forbidden, InvalidTransition, NotFound, ValidationFailed
from users.models import Role, User

FIXED_NOW = datetime(2026, 10, 5, 9, 30, tzinfo=dt_timezone.utc)


def fixed_clock():
    return FIXED_NOW


class OrderServicesBaseTestCase(TestCase):
    """Base test case with shared setup for order service tests."""

    @classmethod
    def setUpTestData(cls):
        cls.supplier = Supplier.objects.create(name='Acme Machining', contact_name='Li Wei')
        cls.other_supplier = Supplier.objects.create(name='Bolt Brothers')
        cls.blocked_supplier = Supplier.objects.create(name='Closed Corp', status=SupplierStatus.BLOCKED)
        cls.material = Material.objects.create(code='M-001', name='Steel Plate', unit='pcs')

        cls.purchaser = User.objects.create_user(username='buyer', password='pass', role=Role.PURCHASER)
        cls.admin = User.objects.create_user(username='boss', password='pass', role=Role.ADMIN)
        cls.finance = User.objects.create_user(username='books', password='pass', role=Role.FINANCE)
        cls.supplier_user = User.objects.create_user(
            username='acme', password='pass', role=Role.SUPPLIER, supplier=cls.supplier,
        )
        cls.other_supplier_user = User.objects.create_user(
            username='bolt', password='pass', role=Role.SUPPLIER, supplier=cls.other_supplier,
        )

    def service(self, user=None, **kwargs):
        kwargs.setdefault('clock', fixed_clock)
        return OrderService(user or self.purchaser, **kwargs)

    def create_order(self, quantity='10', unit_price='100.00', **kwargs):
        return self.service().create_order(
            supplier_id=self.supplier.pk,
            material_id=self.material.pk,
            quantity=quantity,
            unit_price=unit_price,
            **kwargs,
        )

    def advance(self, order, *actions):
        """Move an order along the happy path with the right actor for each step."""
        for action in actions:
            if action == 'confirm':
                self.service(self.supplier_user).confirm_order(order.pk)
            elif action == 'ship':
                self.service(self.supplier_user).ship_order(order.pk, tracking_no='SF123')
            else:
                getattr(self.service(), f"{action}_order")(order.pk)
        order.refresh_from_db()
        return order


class CreateOrderTests(OrderServicesBaseTestCase):

    def test_create_sets_pending_total_and_created_log(self):
        order = self.create_order()

        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.total_amount, Decimal('1000.00'))
        self.assertEqual(order.created_by, self.purchaser)
        logs = list(order.logs.all())
        self.assertEqual(len(logs), 1)
        self.assertEqual(logs[0].action, 'created')
        self.assertIsNone(logs[0].old_status)
        self.assertEqual(logs[0].new_status, OrderStatus.PENDING)
        self.assertEqual(logs[0].operator, self.purchaser)

    def test_timestamps_follow_injected_clock(self):
        order = self.create_order()
        order.refresh_from_db()

        self.assertEqual(order.created_at, FIXED_NOW)
        self.assertEqual(order.updated_at, FIXED_NOW)
        self.assertEqual(order.logs.get().created_at, order.created_at)

    def test_order_number_format(self):
        order = self.service(suffix_generator=lambda: 42).create_order(
            supplier_id=self.supplier.pk, material_id=self.material.pk, quantity='1',
        )
        self.assertEqual(order.order_number, 'PO2026100042')

    def test_missing_price_gives_zero_total(self):
        order = self.create_order(unit_price=None)
        self.assertIsNone(order.unit_price)
        self.assertEqual(order.total_amount, Decimal('0'))

    def test_total_is_exact_for_fractional_values(self):
        order = self.create_order(quantity='3.33', unit_price='0.10')
        order.refresh_from_db()
        self.assertEqual(order.total_amount, Decimal('0.3330'))

    def test_float_input_is_not_binary_rounded(self):
        order = self.create_order(quantity=0.1, unit_price=0.2)
        self.assertEqual(order.quantity, Decimal('0.10'))
        self.assertEqual(order.total_amount, Decimal('0.02'))

    def test_delivery_date_string_is_parsed(self):
        order = self.create_order(delivery_date='2026-11-01')
        self.assertEqual(order.delivery_date, date(2026, 11, 1))

    def test_rejects_non_positive_quantity(self):
        for bad in ('0', '-1', None, '', 'abc', 'NaN'):
            with self.subTest(quantity=bad):
                with self.assertRaises(ValidationFailed):
                    self.create_order(quantity=bad)
        self.assertFalse(Order.objects.exists())
        self.assertFalse(OrderLog.objects.exists())

    def test_rejects_three_decimal_places(self):
        with self.assertRaises(ValidationFailed):
            self.create_order(quantity='1.005')

    def test_rejects_negative_price(self):
        with self.assertRaises(ValidationFailed):
            self.create_order(unit_price='-5')

    def test_rejects_bad_delivery_date(self):
        with self.assertRaises(ValidationFailed):
            self.create_order(delivery_date='next tuesday')

    def test_blocked_supplier_is_rejected(self):
        with self.assertRaises(SupplierInactive) as ctx:
            self.service().create_order(
                supplier_id=self.blocked_supplier.pk, material_id=self.material.pk, quantity='1',
            )
        self.assertEqual(ctx.exception.kind, 'supplier_inactive')
        self.assertFalse(Order.objects.exists())

    def test_unknown_supplier_is_rejected(self):
        with self.assertRaises(SupplierInactive):
            self.service().create_order(supplier_id=999999, material_id=self.material.pk, quantity='1')

    def test_unknown_material_is_rejected(self):
        with self.assertRaises(MaterialNotFound) as ctx:
            self.service().create_order(supplier_id=self.supplier.pk, material_id=999999, quantity='1')
        self.assertEqual(ctx.exception.kind, 'material_not_found')

    def test_supplier_cannot_create(self):
        with self.assertRaises(Forbidden):
            self.service(self.supplier_user).create_order(
                supplier_id=self.supplier.pk, material_id=self.material.pk, quantity='1',
            )

    def test_finance_cannot_create(self):
        with self.assertRaises(Forbidden):
            self.service(self.finance).create_order(
                supplier_id=self.supplier.pk, material_id=self.material.pk, quantity='1',
            )

    def test_admin_can_create(self):
        order = self.service(self.admin).create_order(
            supplier_id=self.supplier.pk, material_id=self.material.pk, quantity='2', unit_price='5',
        )
        self.assertEqual(order.total_amount, Decimal('10'))

    def test_create_notifies_supplier_users_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            order = self.create_order()
        self.assertEqual(len(callbacks), 1)
        notification = Notification.objects.get(recipient=self.supplier_user)
        self.assertIn(order.order_number, notification.content)
        self.assertEqual(notification.notification_type, 'order')
        self.assertFalse(Notification.objects.filter(recipient=self.other_supplier_user).exists())


# ── order numbers ─────────────────────────────────────────────────────────────

class OrderNumberTests(OrderServicesBaseTestCase):

    def test_collision_retries_with_new_suffix(self):
        first = self.service(suffix_generator=lambda: 7).create_order(
            supplier_id=self.supplier.pk, material_id=self.material.pk, quantity='1',
        )
        suffixes = iter([7, 8])
        second = self.service(suffix_generator=lambda: next(suffixes)).create_order(
            supplier_id=self.supplier.pk, material_id=self.material.pk, quantity='1',
        )
        self.assertEqual(first.order_number, 'PO2026100007')
        self.assertEqual(second.order_number, 'PO2026100008')
        self.assertEqual(OrderLog.objects.filter(order=second).count(), 1)

    @override_settings(SRM_ORDER_NUMBER_ATTEMPTS=3)
    def test_exhausted_retries_raise_duplicate_order_number(self):
        self.service(suffix_generator=lambda: 7).create_order(
            supplier_id=self.supplier.pk, material_id=self.material.pk, quantity='1',
        )
        generator = mock.Mock(return_value=7)

        with self.assertRaises(DuplicateOrderNumber) as ctx:
            self.service(suffix_generator=generator).create_order(
                supplier_id=self.supplier.pk, material_id=self.material.pk, quantity='1',
            )

        self.assertEqual(generator.call_count, 3)
        self.assertEqual(ctx.exception.kind, 'duplicate_order_number')
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(Order.objects.count(), 1)
        self.assertEqual(OrderLog.objects.count(), 1)


# ── transitions ───────────────────────────────────────────────────────────────

class TransitionTests(OrderServicesBaseTestCase):

    def test_confirm_by_owning_supplier(self):
        order = self.create_order()
        result = self.service(self.supplier_user).confirm_order(order.pk)

        self.assertEqual(result.status, OrderStatus.CONFIRMED)
        log = order.logs.last()
        self.assertEqual((log.action, log.old_status, log.new_status), ('confirmed', 'pending', 'confirmed'))
        self.assertEqual(log.operator, self.supplier_user)

    def test_confirm_by_other_supplier_is_forbidden(self):
        order = self.create_order()
        with self.assertRaises(Forbidden):
            self.service(self.other_supplier_user).confirm_order(order.pk)
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.logs.count(), 1)

    def test_purchaser_cannot_confirm(self):
        order = self.create_order()
        with self.assertRaises(Forbidden):
            self.service().confirm_order(order.pk)

    def test_supplier_cannot_receive(self):
        order = self.advance(self.create_order(), 'confirm', 'ship')
        with self.assertRaises(Forbidden):
            self.service(self.supplier_user).receive_order(order.pk)

    def test_ship_records_tracking_number_in_remark(self):
        order = self.advance(self.create_order(), 'confirm')
        self.service(self.supplier_user).ship_order(order.pk, tracking_no='  SF123 ')

        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.SHIPPED)
        self.assertEqual(order.tracking_no, 'SF123')
        self.assertIn('SF123', order.logs.last().remark)

    def test_ship_without_tracking_number(self):
        order = self.advance(self.create_order(), 'confirm')
        self.service(self.supplier_user).ship_order(order.pk)
        order.refresh_from_db()
        self.assertEqual(order.tracking_no, '')
        self.assertEqual(order.logs.last().remark, 'Shipped')

    def test_receive_from_pending_is_invalid(self):
        order = self.create_order()
        with self.assertRaises(InvalidTransition) as ctx:
            self.service().receive_order(order.pk)

        self.assertEqual(ctx.exception.current_status, 'pending')
        self.assertEqual(ctx.exception.operation, 'receive')
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.logs.count(), 1)

    def test_ship_from_pending_is_invalid(self):
        order = self.create_order()
        with self.assertRaises(InvalidTransition):
            self.service(self.supplier_user).ship_order(order.pk, tracking_no='X')
        order.refresh_from_db()
        self.assertEqual(order.tracking_no, '')

    def test_cancel_from_pending_and_confirmed(self):
        pending = self.create_order()
        confirmed = self.advance(self.create_order(), 'confirm')

        for order, previous in ((pending, 'pending'), (confirmed, 'confirmed')):
            with self.subTest(previous=previous):
                self.service().cancel_order(order.pk, reason='Budget cut')
                order.refresh_from_db()
                self.assertEqual(order.status, OrderStatus.CANCELLED)
                log = order.logs.last()
                self.assertEqual(log.old_status, previous)
                self.assertEqual(log.action, 'cancelled')
                self.assertIn('Budget cut', log.remark)

    def test_cancel_shipped_order_fails(self):
        order = self.advance(self.create_order(), 'confirm', 'ship')
        with self.assertRaises(InvalidTransition):
            self.service().cancel_order(order.pk)
        self.assertEqual(order.logs.count(), 3)

    def test_unknown_order_is_not_found(self):
        with self.assertRaises(NotFound):
            self.service().receive_order(999999)

    def test_terminal_orders_reject_every_mutation(self):
        completed = self.advance(self.create_order(), 'confirm', 'ship', 'receive', 'complete')
        cancelled = self.create_order()
        self.service().cancel_order(cancelled.pk)

        for order in (completed, cancelled):
            log_count = order.logs.count()
            calls = [
                lambda: self.service(self.supplier_user).confirm_order(order.pk),
                lambda: self.service(self.supplier_user).ship_order(order.pk),
                lambda: self.service().receive_order(order.pk),
                lambda: self.service().complete_order(order.pk),
                lambda: self.service().cancel_order(order.pk),
                lambda: self.service().update_order(order.pk, quantity='99'),
            ]
            for call in calls:
                with self.assertRaises(OrderTerminal) as ctx:
                    call()
                self.assertEqual(ctx.exception.kind, 'order_terminal')
            self.assertEqual(order.logs.count(), log_count)

    def test_concurrent_transition_loses_with_invalid_transition(self):
        """Confirm reads a stale pending row while a cancel has already committed."""
        order = self.create_order()
        stale = Order.objects.get(pk=order.pk)
        self.service().cancel_order(order.pk)

        with mock.patch.object(OrderService, '_lock_order', return_value=stale):
            with self.assertRaises(InvalidTransition) as ctx:
                self.service(self.supplier_user).confirm_order(order.pk)

        self.assertEqual(ctx.exception.current_status, 'cancelled')
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.CANCELLED)
        self.assertEqual(
            list(order.logs.values_list('action', flat=True)), ['created', 'cancelled']
        )

    def test_notification_failure_does_not_fail_transition(self):
        order = self.create_order()
        notifier = mock.Mock()
        notifier.notify.side_effect = RuntimeError('sink down')

        with self.assertLogs('apps.notifications.services', level='ERROR'):
            with self.captureOnCommitCallbacks(execute=True):
                self.service(self.supplier_user, notifier=notifier).confirm_order(order.pk)

        notifier.notify.assert_called_once()
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.CONFIRMED)

    def test_confirm_notifies_order_creator(self):
        order = self.create_order()
        notifier = mock.Mock()
        with self.captureOnCommitCallbacks(execute=True):
            self.service(self.supplier_user, notifier=notifier).confirm_order(order.pk)
        user_id, event = notifier.notify.call_args.args
        self.assertEqual(user_id, self.purchaser.pk)
        self.assertEqual(event.link, f"/orders/{order.pk}")

    def test_failed_transition_schedules_no_notification(self):
        order = self.create_order()
        with self.captureOnCommitCallbacks() as callbacks:
            with self.assertRaises(InvalidTransition):
                self.service().complete_order(order.pk)
        self.assertEqual(callbacks, [])


# ── field edits ───────────────────────────────────────────────────────────────

class UpdateOrderTests(OrderServicesBaseTestCase):

    def test_update_recomputes_total_without_log(self):
        order = self.create_order()
        updated = self.service().update_order(order.pk, quantity='4', unit_price='2.50')

        self.assertEqual(updated.total_amount, Decimal('10.00'))
        updated.refresh_from_db()
        self.assertEqual(updated.total_amount, compute_total(updated.quantity, updated.unit_price))
        self.assertEqual(updated.status, OrderStatus.PENDING)
        self.assertEqual(updated.logs.count(), 1)

    def test_update_stamps_updated_at_from_clock(self):
        order = self.create_order()
        later = datetime(2026, 10, 6, 14, 0, tzinfo=dt_timezone.utc)
        OrderService(self.purchaser, clock=lambda: later).update_order(order.pk, notes='Rush delivery')

        order.refresh_from_db()
        self.assertEqual(order.created_at, FIXED_NOW)
        self.assertEqual(order.updated_at, later)

    def test_update_is_recorded_in_history(self):
        order = self.create_order()
        self.service().update_order(order.pk, notes='Rush delivery')
        latest = order.history.first()
        self.assertEqual(latest.notes, 'Rush delivery')
        self.assertEqual(latest.history_type, '~')

    def test_clearing_price_zeroes_total(self):
        order = self.create_order()
        updated = self.service().update_order(order.pk, unit_price=None)
        self.assertEqual(updated.total_amount, Decimal('0'))

    def test_update_allowed_until_received(self):
        order = self.advance(self.create_order(), 'confirm', 'ship', 'receive')
        updated = self.service().update_order(order.pk, delivery_date='2026-12-24')
        self.assertEqual(updated.delivery_date, date(2026, 12, 24))
        self.assertEqual(updated.status, OrderStatus.RECEIVED)

    def test_update_rejects_unknown_fields(self):
        order = self.create_order()
        with self.assertRaises(ValidationFailed):
            self.service().update_order(order.pk, status='completed')

    def test_update_rejects_invalid_quantity(self):
        order = self.create_order()
        with self.assertRaises(ValidationFailed):
            self.service().update_order(order.pk, quantity='0')
        order.refresh_from_db()
        self.assertEqual(order.quantity, Decimal('10'))

    def test_supplier_cannot_update(self):
        order = self.create_order()
        with self.assertRaises(Forbidden):
            self.service(self.supplier_user).update_order(order.pk, notes='mine now')

    def test_update_unknown_order(self):
        with self.assertRaises(NotFound):
            self.service().update_order(999999, notes='x')
