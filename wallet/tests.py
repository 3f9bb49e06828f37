from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from billing.services import delete_bill, lock_bill, unlock_bill, upsert_bill_from_order
from core.exceptions import NotFoundError
from core.factories import make_distributor, make_product, make_user, actor_for, line, today
from orders.services import create_order, mark_delivered
from payments.services import create_payment, delete_payment
from . import services


class BalanceTest(TestCase):
    def setUp(self):
        self.actor = actor_for(make_user('admin'))
        self.distributor = make_distributor()
        self.product = make_product(self.distributor, 'Toned Milk', '50.00')

    def _bill(self, packs):
        order = create_order(self.actor, self.distributor.pk, today(), [line(self.product, packs)])
        return mark_delivered(self.actor, order)[1]

    def test_no_records_means_zero(self):
        self.assertEqual(services.get_balance(self.distributor.pk), Decimal('0'))

    def test_unknown_distributor(self):
        with self.assertRaises(NotFoundError):
            services.get_balance(9999)

    def test_overpayment_gives_negative_balance(self):
        self._bill(10)
        self._bill(20)
        create_payment(self.actor, self.distributor.pk, '1000', 'Cash')
        create_payment(self.actor, self.distributor.pk, '800', 'PhonePe')
        self.assertEqual(services.get_balance(self.distributor.pk), Decimal('-300.00'))

    def test_balance_is_bills_minus_payments(self):
        self._bill(3)
        create_payment(self.actor, self.distributor.pk, '40', 'Cash')
        other = make_distributor('Amul Point')
        create_payment(self.actor, other.pk, '999', 'Cash')
        self.assertEqual(services.get_balance(self.distributor.pk), Decimal('110.00'))

    def test_ledger_matches_aggregate_after_mixed_operations(self):
        first = self._bill(4)
        second = self._bill(2)
        payment = create_payment(self.actor, self.distributor.pk, '75.50', 'Cash')
        create_payment(self.actor, self.distributor.pk, '20', 'GooglePay')
        upsert_bill_from_order(self.actor, first.order)
        lock_bill(self.actor, second)
        unlock_bill(self.actor, second)
        delete_bill(self.actor, second)
        delete_payment(self.actor, payment)

        snapshot = services.get_wallet_snapshot(self.distributor.pk)
        self.assertTrue(snapshot['consistent'])
        self.assertEqual(snapshot['total_billed'], Decimal('200.00'))
        self.assertEqual(snapshot['total_paid'], Decimal('20.00'))
        self.assertEqual(snapshot['wallet_balance'], Decimal('180.00'))
        self.assertEqual(snapshot['ledger_balance'], snapshot['wallet_balance'])

    def test_mismatch_is_flagged(self):
        self._bill(1)
        self.distributor.ledger_entries.all().delete()
        with self.assertLogs('wallet.services', level='WARNING'):
            snapshot = services.get_wallet_snapshot(self.distributor.pk)
        self.assertFalse(snapshot['consistent'])


class WalletApiTest(APITestCase):
    def setUp(self):
        self.admin = make_user('admin')
        self.distributor = make_distributor()
        self.dist_user = make_user('gokul', role='distributor', distributor=self.distributor)
        product = make_product(self.distributor)
        actor = actor_for(self.admin)
        order = create_order(actor, self.distributor.pk, today(), [line(product, 3)])
        mark_delivered(actor, order)
        create_payment(actor, self.distributor.pk, '30', 'Cash')

    def test_admin_reads_wallet(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(f'/api/wallet/{self.distributor.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['wallet_balance'], Decimal('120.00'))
        self.assertEqual(self.client.get('/api/wallet/9999/').status_code, status.HTTP_404_NOT_FOUND)

    def test_distributor_reads_own_wallet_only(self):
        self.client.force_authenticate(self.dist_user)
        response = self.client.get('/api/wallet/me/')
        self.assertEqual(response.data['distributor_id'], self.distributor.pk)
        self.assertEqual(response.data['wallet_balance'], Decimal('120.00'))
        response = self.client.get(f'/api/wallet/{self.distributor.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_ledger_listing(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(f'/api/wallet/{self.distributor.pk}/ledger/')
        self.assertEqual([e['entry_type'] for e in response.data], ['bill', 'payment'])
        self.assertEqual([e['amount'] for e in response.data], ['150.00', '-30.00'])
