from decimal import Decimal

from rest_framework import status
from rest_framework.test import APITestCase

from core.factories import make_distributor, make_product, make_user, actor_for, line, today
from orders.services import create_order, mark_delivered
from payments.services import create_payment
from .models import Distributor


class DistributorApiTest(APITestCase):
    def setUp(self):
        self.admin = make_user('admin')
        self.staff = make_user('staff', role='staff')
        self.distributor = make_distributor()
        self.dist_user = make_user('gokul', role='distributor', distributor=self.distributor)

    def test_admin_creates_distributor(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/distributors/', {
            'distributor_name': 'Nandini', 'company_name': 'KMF', 'contact': '98450 00000',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], Distributor.ACTIVE)

    def test_staff_reads_but_cannot_write(self):
        self.client.force_authenticate(self.staff)
        self.assertEqual(self.client.get('/api/distributors/').status_code, status.HTTP_200_OK)
        response = self.client.post('/api/distributors/', {'distributor_name': 'X', 'company_name': 'Y'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_distributor_profile(self):
        self.client.force_authenticate(self.dist_user)
        response = self.client.get('/api/distributors/profile/')
        self.assertEqual(response.data['id'], self.distributor.pk)
        self.assertEqual(self.client.get('/api/distributors/').status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_with_financial_records_conflicts(self):
        empty = make_distributor('Empty Dairy')
        product = make_product(self.distributor)
        create_order(actor_for(self.admin), self.distributor.pk, today(), [line(product, 1)])
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f'/api/distributors/{self.distributor.pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        response = self.client.delete(f'/api/distributors/{empty.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_overview(self):
        actor = actor_for(self.admin)
        product = make_product(self.distributor)
        order = create_order(actor, self.distributor.pk, today(), [line(product, 2)])
        mark_delivered(actor, order)
        create_payment(actor, self.distributor.pk, '40', 'Cash')

        self.client.force_authenticate(self.staff)
        response = self.client.get(f'/api/distributors/{self.distributor.pk}/overview/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['orders']), 1)
        self.assertEqual(len(response.data['bills']), 1)
        self.assertEqual(len(response.data['payments']), 1)
        self.assertEqual(response.data['wallet']['wallet_balance'], Decimal('60.00'))
