from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.factories import make_distributor, make_user, actor_for
from wallet.models import LedgerEntry
from wallet.services import get_balance
from .models import Payment
from . import services


class PaymentServiceTest(TestCase):
    def setUp(self):
        self.staff = make_user('staff', role='staff')
        self.actor = actor_for(self.staff)
        self.distributor = make_distributor()

    def test_payment_is_recorded_with_ledger_entry(self):
        payment = services.create_payment(self.actor, self.distributor.pk, '250.50', 'Cash')
        self.assertEqual(payment.amount, Decimal('250.50'))
        self.assertEqual(payment.created_by, self.staff)
        self.assertIsNotNone(payment.payment_date)
        entry = LedgerEntry.objects.get(payment=payment)
        self.assertEqual(entry.entry_type, LedgerEntry.PAYMENT)
        self.assertEqual(entry.amount, Decimal('-250.50'))

    def test_amount_must_be_positive(self):
        for amount in ('0', '-10', 'abc', None):
            with self.assertRaises(ValidationError):
                services.create_payment(self.actor, self.distributor.pk, amount, 'Cash')
        self.assertFalse(Payment.objects.exists())

    def test_amount_must_fit_money_column(self):
        for amount in ('1e30', '10000000000', 'Infinity', 'NaN', '0.004'):
            with self.assertRaises(ValidationError):
                services.create_payment(self.actor, self.distributor.pk, amount, 'Cash')
        self.assertFalse(Payment.objects.exists())
        payment = services.create_payment(self.actor, self.distributor.pk, '9999999999.99', 'Cash')
        self.assertEqual(payment.amount, Decimal('9999999999.99'))

    def test_method_must_be_known(self):
        with self.assertRaises(ValidationError):
            services.create_payment(self.actor, self.distributor.pk, '10', 'Cheque')

    def test_method_spelling_is_normalized(self):
        payment = services.create_payment(self.actor, self.distributor.pk, '10', 'Google Pay')
        self.assertEqual(payment.payment_method, 'GooglePay')
        self.assertEqual(services.normalize_method('bank transfer'), 'BankTransfer')

    def test_unknown_distributor(self):
        with self.assertRaises(NotFoundError):
            services.create_payment(self.actor, 9999, '10', 'Cash')

    def test_deleting_payment_raises_balance_by_its_amount(self):
        services.create_payment(self.actor, self.distributor.pk, '500', 'Cash')
        payment = services.create_payment(self.actor, self.distributor.pk, '200', 'PhonePe')
        before = get_balance(self.distributor.pk)
        services.delete_payment(self.actor, payment)
        self.assertEqual(get_balance(self.distributor.pk), before + Decimal('200'))
        with self.assertRaises(ConflictError):
            services.delete_payment(self.actor, payment)
        with self.assertRaises(NotFoundError):
            services.get_payment(payment.pk)


class PaymentApiTest(APITestCase):
    def setUp(self):
        self.admin = make_user('admin')
        self.staff = make_user('staff', role='staff')
        self.distributor = make_distributor()
        self.other = make_distributor('Amul Point')
        self.dist_user = make_user('gokul', role='distributor', distributor=self.distributor)

    def _pay(self, distributor, amount='100', method='Cash'):
        self.client.force_authenticate(self.staff)
        return self.client.post('/api/payments/', {
            'distributor': distributor.pk, 'amount': amount, 'payment_method': method,
        }, format='json')

    def test_staff_records_payment(self):
        response = self._pay(self.distributor, '120.25', 'NetBanking')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['amount'], '120.25')
        self.assertEqual(response.data['payment_method'], 'NetBanking')

    def test_invalid_amount_is_bad_request(self):
        response = self._pay(self.distributor, '-5')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Payment amount must be positive.')

    def test_huge_amount_is_bad_request(self):
        response = self._pay(self.distributor, '1e30')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data['detail'])
        self.assertFalse(Payment.objects.exists())

    def test_malformed_distributor_filter_is_bad_request(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get('/api/payments/', {'distributor': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_distributor_sees_own_payments_and_cannot_record(self):
        self._pay(self.distributor)
        self._pay(self.other)
        self.client.force_authenticate(self.dist_user)
        response = self.client.get('/api/payments/')
        self.assertEqual([p['distributor'] for p in response.data], [self.distributor.pk])
        response = self.client.post('/api/payments/', {
            'distributor': self.distributor.pk, 'amount': '10', 'payment_method': 'Cash',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_bulk_delete(self):
        first = self._pay(self.distributor).data['id']
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/payments/bulk-delete/', {'ids': [first, 4242]}, format='json')
        self.assertEqual(response.data['succeeded'], 1)
        self.assertEqual(response.data['results'][1], {'id': 4242, 'ok': False, 'error': 'Payment not found.'})
        self.assertEqual(get_balance(self.distributor.pk), Decimal('0.00'))
