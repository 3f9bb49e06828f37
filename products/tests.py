from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from core.factories import make_distributor, make_product, make_user, actor_for, line, today
from orders.services import create_order
from .models import Product


class PriceDerivationTest(TestCase):
    def setUp(self):
        self.distributor = make_distributor()

    def test_direct_pack_price_wins(self):
        product = make_product(self.distributor, cost_per_pack='40.00',
                               cost_per_packet=Decimal('5.00'), packets_per_pack=10)
        self.assertEqual(product.price_per_pack, Decimal('40.00'))

    def test_packet_price_times_packets(self):
        product = make_product(self.distributor, cost_per_pack=None,
                               cost_per_packet=Decimal('7.25'), packets_per_pack=12)
        self.assertEqual(product.price_per_pack, Decimal('87.00'))
        self.assertEqual(product.calculate_cost(3), Decimal('261.00'))

    def test_no_price_is_underivable(self):
        self.assertIsNone(Product.derive_price_per_pack(None, Decimal('5.00'), None))


class ProductApiTest(APITestCase):
    def setUp(self):
        self.admin = make_user('admin')
        self.staff = make_user('staff', role='staff')
        self.distributor = make_distributor()
        self.other = make_distributor('Amul Point')
        self.dist_user = make_user('gokul', role='distributor', distributor=self.distributor)
        self.milk = make_product(self.distributor, 'Toned Milk', '50.00')
        self.paneer = make_product(self.other, 'Paneer', '90.00')

    def test_product_without_price_is_rejected(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/products/', {
            'distributor': self.distributor.pk, 'name': 'Lassi', 'pack_quantity': '200', 'pack_unit': 'ml',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cost per pack', response.data['error'])

    def test_admin_creates_product_with_packet_price(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/products/', {
            'distributor': self.distributor.pk, 'name': 'Lassi', 'pack_quantity': '200', 'pack_unit': 'ml',
            'cost_per_packet': '10.00', 'packets_per_pack': 6,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['price_per_pack'], '60.00')

    def test_staff_cannot_write(self):
        self.client.force_authenticate(self.staff)
        response = self.client.patch(f'/api/products/{self.milk.pk}/', {'name': 'Full Cream'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_filter_by_distributor(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get(f'/api/products/?distributor={self.other.pk}')
        self.assertEqual([p['id'] for p in response.data], [self.paneer.pk])

    def test_distributor_sees_own_catalog(self):
        self.client.force_authenticate(self.dist_user)
        response = self.client.get('/api/products/')
        self.assertEqual([p['id'] for p in response.data], [self.milk.pk])

    def test_cost_endpoint(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get(f'/api/products/{self.milk.pk}/cost/?packs=3')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_cost'], Decimal('150.00'))
        response = self.client.get(f'/api/products/{self.milk.pk}/cost/?packs=0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cost_rejects_non_finite_and_oversized_packs(self):
        self.client.force_authenticate(self.staff)
        for packs in ('nan', 'inf', '-inf', 'abc', '1e30'):
            response = self.client.get(f'/api/products/{self.milk.pk}/cost/', {'packs': packs})
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, packs)
            self.assertIn('packs', response.data['detail'])

    def test_malformed_distributor_filter(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get('/api/products/', {'distributor': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_ordered_product_cannot_be_deleted(self):
        create_order(actor_for(self.admin), self.distributor.pk, today(), [line(self.milk, 1)])
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f'/api/products/{self.milk.pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.client.delete(f'/api/products/{self.paneer.pk}/').status_code,
                         status.HTTP_204_NO_CONTENT)
