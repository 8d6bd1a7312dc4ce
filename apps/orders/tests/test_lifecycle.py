# apps/orders/tests/test_lifecycle.py
"""
End-to-end order lifecycle: create -> confirm -> ship -> receive -> complete.
"""
from decimal import Decimal

from apps.orders.models import ORDER_WORKFLOW, OrderLog, OrderStatus
from shared.managers import ImmutableRecordError

from .test_services import OrderServicesBaseTestCase


class OrderLifecycleTestCase(OrderServicesBaseTestCase):
    """
    Flow:
    1. Purchaser creates order (qty 10 @ 100.00)
    2. Supplier confirms, then ships with tracking SF123
    3. Purchaser receives and completes
    4. Verify status, tracking number and the five log entries
    """

    def test_full_lifecycle(self):
        order = self.create_order(quantity='10', unit_price='100.00')
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.total_amount, Decimal('1000.00'))

        self.service(self.supplier_user).confirm_order(order.pk)
        self.service(self.supplier_user).ship_order(order.pk, tracking_no='SF123')
        self.service(self.purchaser).receive_order(order.pk)
        self.service(self.admin).complete_order(order.pk)

        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.COMPLETED)
        self.assertEqual(order.tracking_no, 'SF123')
        self.assertTrue(order.is_terminal)
        self.assertEqual(order.allowed_actions, [])
        self.assertEqual(
            list(order.logs.values_list('action', flat=True)),
            ['created', 'confirmed', 'shipped', 'received', 'completed'],
        )

    def test_log_forms_contiguous_path(self):
        """Each log entry starts where the previous one ended, along legal edges."""
        order = self.advance(self.create_order(), 'confirm', 'ship', 'receive')
        cancelled = self.advance(self.create_order(), 'confirm')
        self.service().cancel_order(cancelled.pk)

        for subject in (order, cancelled):
            logs = list(subject.logs.all())
            self.assertEqual((logs[0].old_status, logs[0].new_status), (None, OrderStatus.PENDING))
            for previous, entry in zip(logs, logs[1:]):
                self.assertEqual(entry.old_status, previous.new_status)
                legal_targets = {
                    ORDER_WORKFLOW.get(action).target
                    for action in ORDER_WORKFLOW.allowed_actions(entry.old_status)
                }
                self.assertIn(entry.new_status, legal_targets)
            subject.refresh_from_db()
            self.assertEqual(logs[-1].new_status, subject.status)

    def test_total_invariant_after_each_edit(self):
        order = self.create_order(quantity='1', unit_price='1')
        for quantity, price in (('2.5', '4.40'), ('7', None), ('0.01', '99999.99')):
            self.service().update_order(order.pk, quantity=quantity, unit_price=price)
            order.refresh_from_db()
            expected = Decimal(quantity) * (Decimal(price) if price else Decimal('0'))
            self.assertEqual(order.total_amount, expected)

    def test_log_entries_are_immutable(self):
        order = self.create_order()
        entry = order.logs.get()

        entry.remark = 'rewritten'
        with self.assertRaises(ImmutableRecordError):
            entry.save()
        with self.assertRaises(ImmutableRecordError):
            entry.delete()
        with self.assertRaises(ImmutableRecordError):
            OrderLog.objects.filter(order=order).update(remark='rewritten')
        with self.assertRaises(ImmutableRecordError):
            OrderLog.objects.filter(order=order).delete()

        entry.refresh_from_db()
        self.assertEqual(entry.remark, 'Order created')
