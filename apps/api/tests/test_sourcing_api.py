# apps/api/tests/test_sourcing_api.py
"""
API tests for /api/v1/inquiries/ and /api/v1/quotations/.
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.materials.models import Material
from apps.orders.models import Order, OrderStatus
from apps.sourcing.models import Inquiry, InquiryStatus
from apps.sourcing.services import SourcingService
from apps.suppliers.models import Supplier
from users.models import Role, User


class SourcingAPITestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.supplier = Supplier.objects.create(name='Acme Machining')
        cls.other_supplier = Supplier.objects.create(name='Bolt Brothers')
        cls.material = Material.objects.create(code='BJ-001', name='Precision Bearing', unit='pcs')

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

    def published_inquiry(self):
        service = SourcingService(self.purchaser)
        inquiry = service.create_inquiry(title='Bearings Q4')
        return service.publish_inquiry(inquiry.pk)

    def submit(self, inquiry, user=None, **overrides):
        self.client.force_authenticate(user=user or self.supplier_user)
        data = {
            'unit_price': '24.50',
            'quantity': '100',
            'material': self.material.pk,
            'delivery_days': 10,
        }
        data.update(overrides)
        response = self.client.post(f'/api/v1/inquiries/{inquiry.pk}/quotations/', data, format='json')
        self.client.force_authenticate(user=self.purchaser)
        return response


class InquiryAPITests(SourcingAPITestCase):

    def test_create_publish_close(self):
        response = self.client.post('/api/v1/inquiries/', {'title': 'Bearings Q4'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], InquiryStatus.DRAFT)
        self.assertTrue(response.data['inquiry_number'].startswith('IQ'))
        pk = response.data['id']

        response = self.client.post(f'/api/v1/inquiries/{pk}/publish/')
        self.assertEqual(response.data['status'], InquiryStatus.PUBLISHED)

        response = self.client.post(f'/api/v1/inquiries/{pk}/close/')
        self.assertEqual(response.data['status'], InquiryStatus.CLOSED)

    def test_edit_after_publish_conflicts(self):
        inquiry = self.published_inquiry()
        response = self.client.patch(f'/api/v1/inquiries/{inquiry.pk}/', {'title': 'New'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['operation'], 'update')

    def test_supplier_list_hides_drafts(self):
        SourcingService(self.purchaser).create_inquiry(title='Hidden draft')
        published = self.published_inquiry()
        self.client.force_authenticate(user=self.supplier_user)

        response = self.client.get('/api/v1/inquiries/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data['results']], [published.pk])

    def test_supplier_cannot_create_inquiry(self):
        self.client.force_authenticate(user=self.supplier_user)
        response = self.client.post('/api/v1/inquiries/', {'title': 'Nope'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Inquiry.objects.exists())


class QuotationAPITests(SourcingAPITestCase):

    def test_submit_and_list_mine(self):
        inquiry = self.published_inquiry()
        response = self.submit(inquiry)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['supplier'], self.supplier.pk)

        self.client.force_authenticate(user=self.supplier_user)
        response = self.client.get('/api/v1/quotations/mine/')
        self.assertEqual(len(response.data), 1)

    def test_second_quotation_is_rejected(self):
        inquiry = self.published_inquiry()
        self.submit(inquiry)
        response = self.submit(inquiry, unit_price='20.00')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['kind'], 'validation_failed')

    def test_suppliers_only_see_their_own_quotations(self):
        inquiry = self.published_inquiry()
        self.submit(inquiry)
        self.submit(inquiry, user=self.other_supplier_user)

        self.assertEqual(len(self.client.get(f'/api/v1/inquiries/{inquiry.pk}/quotations/').data), 2)
        self.client.force_authenticate(user=self.other_supplier_user)
        response = self.client.get(f'/api/v1/inquiries/{inquiry.pk}/quotations/')
        self.assertEqual([row['supplier'] for row in response.data], [self.other_supplier.pk])

    def test_accept_places_order(self):
        inquiry = self.published_inquiry()
        quotation_id = self.submit(inquiry).data['id']

        response = self.client.post(f'/api/v1/quotations/{quotation_id}/accept/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'accepted')
        order = Order.objects.get(pk=response.data['order'])
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(response.data['order_detail']['order_number'], order.order_number)

    def test_reject_stores_reason(self):
        inquiry = self.published_inquiry()
        quotation_id = self.submit(inquiry).data['id']

        response = self.client.post(
            f'/api/v1/quotations/{quotation_id}/reject/', {'reason': 'Too expensive'}, format='json',
        )

        self.assertEqual(response.data['status'], 'rejected')
        self.assertEqual(response.data['reject_reason'], 'Too expensive')

    def test_supplier_cannot_accept(self):
        inquiry = self.published_inquiry()
        quotation_id = self.submit(inquiry).data['id']
        self.client.force_authenticate(user=self.supplier_user)

        response = self.client.post(f'/api/v1/quotations/{quotation_id}/accept/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
