import datetime
from decimal import Decimal

from rest_framework import status
from rest_framework.test import APITestCase

from billing.models import Bill
from core.factories import make_distributor, make_product, make_user, actor_for, line, today
from orders.services import create_order, mark_delivered
from payments.services import create_payment


class MonthlyReportTest(APITestCase):
    def setUp(self):
        self.admin = make_user('admin')
        actor = actor_for(self.admin)
        self.gokul = make_distributor('Gokul Dairy')
        self.amul = make_distributor('Amul Point')
        self.gokul_user = make_user('gokul', role='distributor', distributor=self.gokul)
        milk = make_product(self.gokul, 'Toned Milk', '50.00')
        paneer = make_product(self.amul, 'Paneer', '90.00')

        order = create_order(actor, self.gokul.pk, today(), [line(milk, 10)])
        self.damaged_bill = mark_delivered(
            actor, order, damaged_products=[{'product': milk.pk, 'damaged_quantity': Decimal('1')}]
        )[1]
        order = create_order(actor, self.amul.pk, today(), [line(paneer, 2)])
        self.clean_bill = mark_delivered(actor, order)[1]
        create_payment(actor, self.gokul.pk, '300', 'Cash')
        create_payment(actor, self.amul.pk, '100', 'PhonePe')
        # Outside the reporting month.
        create_payment(actor, self.gokul.pk, '999', 'Cash', payment_date=today() - datetime.timedelta(days=40))

    def _month(self, **params):
        now = today()
        params.update({'month': now.month, 'year': now.year})
        return self.client.get('/api/reports/monthly/', params)

    def test_month_totals(self):
        self.client.force_authenticate(self.admin)
        response = self._month()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_billed'], Decimal('630.00'))
        self.assertEqual(response.data['total_paid'], Decimal('400.00'))
        self.assertEqual(response.data['net'], Decimal('230.00'))
        self.assertEqual(response.data['bills_with_damage'], 1)
        self.assertEqual(response.data['bills_without_damage'], 1)
        self.assertEqual(len(response.data['payments']), 2)

    def test_stored_fields_are_returned_unmodified(self):
        self.client.force_authenticate(self.admin)
        response = self._month(distributor=self.gokul.pk)
        bill = response.data['bills'][0]
        self.assertEqual(bill['bill_number'], self.damaged_bill.bill_number)
        self.assertEqual(bill['total_amount'], '450.00')
        self.assertEqual(bill['total_damaged_amount'], '50.00')

    def test_search_by_bill_number(self):
        self.client.force_authenticate(self.admin)
        response = self._month(search=self.clean_bill.bill_number)
        self.assertEqual([b['id'] for b in response.data['bills']], [self.clean_bill.pk])

    def test_voided_bills_are_left_out(self):
        Bill.objects.filter(pk=self.clean_bill.pk).update(is_void=True)
        self.client.force_authenticate(self.admin)
        self.assertEqual(self._month().data['total_billed'], Decimal('450.00'))

    def test_distributor_sees_only_own_records(self):
        self.client.force_authenticate(self.gokul_user)
        response = self._month(distributor=self.amul.pk)
        self.assertEqual(response.data['bills'], [])
        response = self._month()
        self.assertEqual(response.data['total_paid'], Decimal('300.00'))

    def test_bad_period(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get('/api/reports/monthly/', {'month': 13, 'year': 2026})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/reports/monthly/', {'start_date': '2026-02-10', 'end_date': '2026-02-01'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self._month(distributor='abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class DashboardTest(APITestCase):
    def setUp(self):
        self.admin = make_user('admin')
        actor = actor_for(self.admin)
        distributor = make_distributor()
        milk = make_product(distributor)
        create_order(actor, distributor.pk, today(), [line(milk, 1)])
        mark_delivered(actor, create_order(actor, distributor.pk, today(), [line(milk, 4)]))
        create_payment(actor, distributor.pk, '50', 'Cash')

    def test_dashboard_stats(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get('/api/reports/dashboard-stats/')
        self.assertEqual(response.data['total_orders'], 2)
        self.assertEqual(response.data['pending_orders'], 1)
        self.assertEqual(response.data['delivered_orders'], 1)
        self.assertEqual(response.data['unbilled_orders'], 0)
        self.assertEqual(response.data['outstanding'], Decimal('150.00'))

    def test_sales_by_product(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get('/api/reports/sales-by-product/')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['value'], Decimal('200.00'))

    def test_outstanding_by_distributor(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get('/api/reports/outstanding/')
        self.assertEqual(response.data[0]['wallet_balance'], Decimal('150.00'))
        self.assertTrue(response.data[0]['consistent'])
