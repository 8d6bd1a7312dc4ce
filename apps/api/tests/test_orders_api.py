# apps/api/tests/test_orders_api.py
"""
API tests for /api/v1/orders/.

Test coverage:
- Create, list, retrieve and edit through OrderService
- Lifecycle actions with role and ownership checks
- Error rendering: {"error": {"kind", "message", ...}} with the right status
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.materials.models import Material
from apps.orders.models import Order, OrderStatus
from apps.orders.services import OrderService
from apps.suppliers.models import Supplier, SupplierStatus
from users.models import Role, User


class OrdersAPITestCase(TestCase):
    """Base test case with shared setup for order API tests."""

    @classmethod
    def setUpTestData(cls):
        cls.supplier = Supplier.objects.create(name='Acme Machining')
        cls.other_supplier = Supplier.objects.create(name='Bolt Brothers')
        cls.blocked_supplier = Supplier.objects.create(name='Closed Corp', status=SupplierStatus.BLOCKED)
        cls.material = Material.objects.create(code='M-001', name='Steel Plate', unit='pcs')

        cls.purchaser = User.objects.create_user(username='buyer', password='pass', role=Role.PURCHASER)
        cls.supplier_user = User.objects.create_user(
            username='acme', password='pass', role=Role.SUPPLIER, supplier=cls.supplier,
        )
        cls.other_supplier_user = User.objects.create_user(
            username='bolt', password='pass', role=Role.SUPPLIER, supplier=cls.other_supplier,
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.purchaser)

    def as_user(self, user):
        self.client.force_authenticate(user=user)

    def make_order(self, supplier=None, **kwargs):
        kwargs.setdefault('quantity', '10')
        kwargs.setdefault('unit_price', '100.00')
        return OrderService(self.purchaser).create_order(
            supplier_id=(supplier or self.supplier).pk,
            material_id=self.material.pk,
            **kwargs,
        )

    def post_action(self, order, action, data=None, user=None):
        if user is not None:
            self.as_user(user)
        return self.client.post(f'/api/v1/orders/{order.pk}/{action}/', data or {}, format='json')


class OrderCreateAPITests(OrdersAPITestCase):

    def test_create_order(self):
        response = self.client.post('/api/v1/orders/', {
            'supplier': self.supplier.pk,
            'material': self.material.pk,
            'quantity': '10',
            'unit_price': '100.00',
            'delivery_date': '2026-11-01',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], OrderStatus.PENDING)
        self.assertTrue(response.data['order_number'].startswith('PO'))
        self.assertEqual(response.data['total_amount'], '1000.0000')
        self.assertEqual(len(response.data['timeline']), 1)
        self.assertEqual(response.data['timeline'][0]['action'], 'created')

    def test_numeric_json_amounts_are_accepted(self):
        response = self.client.post('/api/v1/orders/', {
            'supplier': self.supplier.pk,
            'material': self.material.pk,
            'quantity': 0.1,
            'unit_price': 0.2,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '0.0200')

    def test_supplier_user_cannot_create(self):
        self.as_user(self.supplier_user)
        response = self.client.post('/api/v1/orders/', {
            'supplier': self.supplier.pk, 'material': self.material.pk, 'quantity': '1',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error']['kind'], 'forbidden')
        self.assertFalse(Order.objects.exists())

    def test_negative_quantity_is_rejected(self):
        response = self.client.post('/api/v1/orders/', {
            'supplier': self.supplier.pk, 'material': self.material.pk, 'quantity': '-1',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'validation_failed')

    def test_missing_quantity_uses_error_body(self):
        response = self.client.post('/api/v1/orders/', {
            'supplier': self.supplier.pk, 'material': self.material.pk,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'validation_failed')
        self.assertEqual(response.data['error']['message'], 'quantity: This field is required.')
        self.assertIn('quantity', response.data['error']['fields'])
        self.assertFalse(Order.objects.exists())

    def test_malformed_json_uses_error_body(self):
        response = self.client.post('/api/v1/orders/', '{not json', content_type='application/json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'validation_failed')

    def test_blocked_supplier_is_rejected(self):
        response = self.client.post('/api/v1/orders/', {
            'supplier': self.blocked_supplier.pk, 'material': self.material.pk, 'quantity': '1',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'supplier_inactive')

    def test_unknown_material_is_rejected(self):
        response = self.client.post('/api/v1/orders/', {
            'supplier': self.supplier.pk, 'material': 99999, 'quantity': '1',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'material_not_found')

    def test_unauthenticated_request_is_rejected(self):
        self.client.force_authenticate(user=None)
        response = self.client.get('/api/v1/orders/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error']['kind'], 'not_authenticated')


class OrderLifecycleAPITests(OrdersAPITestCase):

    def test_happy_path(self):
        order = self.make_order()

        self.assertEqual(self.post_action(order, 'confirm', user=self.supplier_user).data['status'], 'confirmed')
        response = self.post_action(order, 'ship', {'tracking_no': 'SF123'})
        self.assertEqual(response.data['status'], 'shipped')
        self.assertEqual(response.data['tracking_no'], 'SF123')
        self.assertEqual(self.post_action(order, 'receive', user=self.purchaser).data['status'], 'received')
        response = self.post_action(order, 'complete')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'completed')
        self.assertEqual(response.data['allowed_actions'], [])
        self.assertEqual(
            [entry['action'] for entry in response.data['timeline']],
            ['created', 'confirmed', 'shipped', 'received', 'completed'],
        )

    def test_wrong_status_returns_conflict_with_current_status(self):
        order = self.make_order()
        response = self.post_action(order, 'receive')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['kind'], 'invalid_transition')
        self.assertEqual(response.data['error']['current_status'], 'pending')
        self.assertEqual(response.data['error']['operation'], 'receive')

    def test_terminal_order_returns_order_terminal(self):
        order = self.make_order()
        self.post_action(order, 'cancel', {'reason': 'Budget cut'})
        response = self.post_action(order, 'cancel')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['kind'], 'order_terminal')

    def test_purchaser_cannot_confirm(self):
        order = self.make_order()
        response = self.post_action(order, 'confirm')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PENDING)

    def test_other_supplier_cannot_confirm(self):
        order = self.make_order()
        response = self.post_action(order, 'confirm', user=self.other_supplier_user)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_cancel_reason_lands_in_timeline(self):
        order = self.make_order()
        self.post_action(order, 'cancel', {'reason': 'Budget cut'})

        response = self.client.get(f'/api/v1/orders/{order.pk}/timeline/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[-1]['action'], 'cancelled')
        self.assertEqual(response.data[-1]['remark'], 'Order cancelled: Budget cut')
        self.assertEqual(response.data[-1]['operator_name'], 'buyer')

    def test_missing_order_returns_not_found(self):
        response = self.post_action(Order(pk=424242), 'receive')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['kind'], 'not_found')


class OrderQueryAPITests(OrdersAPITestCase):

    def test_list_is_paged(self):
        for _ in range(3):
            self.make_order()

        response = self.client.get('/api/v1/orders/', {'page_size': 2})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(response.data['page_size'], 2)
        self.assertEqual(len(response.data['results']), 2)

    def test_supplier_sees_only_own_orders(self):
        own = self.make_order()
        self.make_order(supplier=self.other_supplier)
        self.as_user(self.supplier_user)

        response = self.client.get('/api/v1/orders/', {'supplier_id': self.other_supplier.pk})

        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['id'], own.pk)

    def test_filter_by_status(self):
        pending = self.make_order()
        cancelled = self.make_order()
        self.post_action(cancelled, 'cancel')

        response = self.client.get('/api/v1/orders/', {'status': 'pending'})

        self.assertEqual([row['id'] for row in response.data['results']], [pending.pk])

    def test_unknown_status_filter_is_rejected(self):
        response = self.client.get('/api/v1/orders/', {'status': 'lost'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'validation_failed')

    def test_other_supplier_cannot_view_order(self):
        order = self.make_order()
        self.as_user(self.other_supplier_user)

        response = self.client.get(f'/api/v1/orders/{order.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_edit_recomputes_total_without_log(self):
        order = self.make_order()

        response = self.client.patch(f'/api/v1/orders/{order.pk}/', {'quantity': '5'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_amount'], '500.0000')
        self.assertEqual(len(response.data['timeline']), 1)

    def test_edit_shipped_order(self):
        order = self.make_order()
        self.post_action(order, 'confirm', user=self.supplier_user)
        self.post_action(order, 'ship', user=self.supplier_user)
        self.as_user(self.purchaser)

        response = self.client.patch(f'/api/v1/orders/{order.pk}/', {'notes': 'Partial pallet'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], OrderStatus.SHIPPED)
        self.assertEqual(response.data['notes'], 'Partial pallet')

    def test_non_numeric_id_is_not_found(self):
        response = self.client.get('/api/v1/orders/abc/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
