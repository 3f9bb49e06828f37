from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import ConflictError
from core.factories import make_distributor, make_product, make_user, actor_for, line, today
from orders.models import Order
from orders.services import create_order, mark_delivered
from wallet.models import LedgerEntry
from wallet.services import get_balance, ledger_balance
from .models import Bill
from . import services


class BillGenerationTest(TestCase):
    def setUp(self):
        self.actor = actor_for(make_user('admin'))
        self.distributor = make_distributor()
        self.a = make_product(self.distributor, 'Product A', '50.00')
        self.b = make_product(self.distributor, 'Product B', '20.00')

    def _deliver(self, items, damage=None):
        order = create_order(self.actor, self.distributor.pk, today(), items)
        return mark_delivered(self.actor, order, damaged_products=damage)

    def test_damage_reduces_billable_quantity(self):
        order, bill = self._deliver(
            [line(self.a, 10), line(self.b, 5)],
            damage=[{'product': self.a.pk, 'damaged_quantity': Decimal('2')}],
        )
        self.assertEqual(bill.total_amount, Decimal('500.00'))
        self.assertEqual(bill.subtotal, Decimal('600.00'))
        self.assertEqual(bill.total_damaged_amount, Decimal('100.00'))
        self.assertTrue(bill.has_damage)
        first = bill.items.get(product=self.a)
        self.assertEqual(first.ordered_quantity, Decimal('10'))
        self.assertEqual(first.damaged_quantity, Decimal('2'))
        self.assertEqual(first.quantity, Decimal('8'))
        self.assertEqual(first.line_total, Decimal('400.00'))

    def test_undamaged_bill_matches_order(self):
        order, bill = self._deliver([line(self.a, 3), line(self.b, 7)])
        self.assertEqual(bill.items.count(), 2)
        self.assertEqual(bill.total_amount, order.total_amount)
        self.assertFalse(bill.has_damage)
        self.assertFalse(bill.locked)

    def test_damage_beyond_quantity_is_clamped(self):
        order, bill = self._deliver(
            [line(self.a, 2), line(self.b, 5)],
            damage=[{'product': self.a.pk, 'damaged_quantity': Decimal('5')}],
        )
        self.assertEqual(bill.items.get(product=self.a).line_total, Decimal('0.00'))
        self.assertEqual(bill.total_amount, Decimal('100.00'))

    def test_damage_is_not_counted_twice_across_lines(self):
        order, bill = self._deliver(
            [line(self.a, 2), line(self.a, 4)],
            damage=[{'product': self.a.pk, 'damaged_quantity': Decimal('3')}],
        )
        quantities = list(bill.items.values_list('quantity', flat=True))
        self.assertEqual(quantities, [Decimal('0'), Decimal('3')])
        self.assertEqual(bill.total_amount, Decimal('150.00'))

    def test_fractional_totals_round_half_up_once(self):
        c = make_product(self.distributor, 'Buttermilk', '0.35')
        order, bill = self._deliver([line(c, '1.5'), line(c, '1.5')])
        self.assertEqual(bill.total_amount, Decimal('1.05'))

    def test_pending_order_cannot_be_billed(self):
        order = create_order(self.actor, self.distributor.pk, today(), [line(self.a, 1)])
        with self.assertRaises(ConflictError):
            services.upsert_bill_from_order(self.actor, order)

    def test_regenerating_unlocked_bill_reverses_old_total(self):
        order, bill = self._deliver([line(self.a, 2)])
        again = services.upsert_bill_from_order(self.actor, order)
        self.assertEqual(again.pk, bill.pk)
        self.assertEqual(again.items.count(), 1)
        types = list(LedgerEntry.objects.filter(bill=bill).values_list('entry_type', flat=True))
        self.assertEqual(types, [LedgerEntry.BILL, LedgerEntry.BILL_REVERSAL, LedgerEntry.BILL])
        self.assertEqual(get_balance(self.distributor.pk), Decimal('100.00'))
        self.assertEqual(ledger_balance(self.distributor.pk), Decimal('100.00'))


class BillLockTest(TestCase):
    def setUp(self):
        self.actor = actor_for(make_user('admin'))
        self.distributor = make_distributor()
        product = make_product(self.distributor)
        order = create_order(self.actor, self.distributor.pk, today(), [line(product, 4)])
        self.order, self.bill = mark_delivered(self.actor, order)

    def test_locked_bill_cannot_be_regenerated_or_deleted(self):
        services.lock_bill(self.actor, self.bill)
        with self.assertRaises(ConflictError):
            services.upsert_bill_from_order(self.actor, self.order)
        with self.assertRaises(ConflictError):
            services.delete_bill(self.actor, self.bill)

        services.unlock_bill(self.actor, self.bill)
        services.delete_bill(self.actor, self.bill)
        self.bill.refresh_from_db()
        self.assertTrue(self.bill.is_void)
        self.assertEqual(get_balance(self.distributor.pk), Decimal('0.00'))
        self.assertEqual(ledger_balance(self.distributor.pk), Decimal('0.00'))

    def test_lock_guards(self):
        with self.assertRaises(ConflictError):
            services.unlock_bill(self.actor, self.bill)
        services.lock_bill(self.actor, self.bill)
        with self.assertRaises(ConflictError):
            services.lock_bill(self.actor, self.bill)

    def test_voided_bill_cannot_be_locked(self):
        services.delete_bill(self.actor, self.bill)
        with self.assertRaises(ConflictError):
            services.lock_bill(self.actor, self.bill)

    def test_deleting_bill_keeps_order_delivered(self):
        services.delete_bill(self.actor, self.bill)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.DELIVERED)

    def test_voided_bill_can_be_regenerated(self):
        services.delete_bill(self.actor, self.bill)
        bill = services.upsert_bill_from_order(self.actor, self.order)
        self.assertFalse(bill.is_void)
        self.assertEqual(get_balance(self.distributor.pk), Decimal('200.00'))
        self.assertEqual(ledger_balance(self.distributor.pk), Decimal('200.00'))


class ReconcileTest(TestCase):
    def setUp(self):
        self.actor = actor_for(make_user('admin'))
        self.distributor = make_distributor()
        product = make_product(self.distributor)
        order = create_order(self.actor, self.distributor.pk, today(), [line(product, 2)])
        # A delivered order whose bill was never written.
        order.status = Order.DELIVERED
        order.locked = True
        order.save()
        self.order = order

    def test_reconcile_bills_missing_orders(self):
        self.assertEqual(list(services.unbilled_orders()), [self.order])
        outcome = services.reconcile_unbilled_orders()
        self.assertEqual(outcome['succeeded'], 1)
        bill = Bill.objects.get(order=self.order)
        self.assertEqual(bill.total_amount, Decimal('100.00'))
        self.assertEqual(bill.updated_by_role, 'system')
        self.assertEqual(list(services.unbilled_orders()), [])

    def test_management_command(self):
        out = StringIO()
        call_command('reconcile_bills', '--dry-run', stdout=out)
        self.assertIn(self.order.order_number, out.getvalue())
        self.assertFalse(Bill.objects.exists())

        call_command('reconcile_bills', stdout=out)
        self.assertTrue(Bill.objects.filter(order=self.order).exists())
        self.assertIn('1 succeeded, 0 failed', out.getvalue())


class BillApiTest(APITestCase):
    def setUp(self):
        self.admin = make_user('admin')
        self.staff = make_user('staff', role='staff')
        self.actor = actor_for(self.admin)
        self.distributor = make_distributor()
        self.other = make_distributor('Amul Point')
        self.dist_user = make_user('gokul', role='distributor', distributor=self.distributor)
        self.bills = []
        for distributor in (self.distributor, self.other):
            product = make_product(distributor)
            order = create_order(self.actor, distributor.pk, today(), [line(product, 1)])
            self.bills.append(mark_delivered(self.actor, order)[1])

    def test_distributor_lists_own_bills(self):
        self.client.force_authenticate(self.dist_user)
        response = self.client.get('/api/bills/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([b['id'] for b in response.data], [self.bills[0].pk])

    def test_filter_by_distributor(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get('/api/bills/', {'distributor': str(self.other.pk)})
        self.assertEqual([b['id'] for b in response.data], [self.bills[1].pk])
        response = self.client.get('/api/bills/', {'distributor': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Must be a whole number.')

    def test_only_admin_locks(self):
        url = f'/api/bills/{self.bills[0].pk}/lock/'
        self.client.force_authenticate(self.staff)
        self.assertEqual(self.client.post(url).status_code, status.HTTP_403_FORBIDDEN)
        self.client.force_authenticate(self.admin)
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['locked'])

    def test_delete_locked_bill_conflicts(self):
        services.lock_bill(self.actor, self.bills[0])
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f'/api/bills/{self.bills[0].pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'Bill is locked; unlock it before deleting.')

    def test_from_order_regenerates(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post('/api/bills/from-order/', {'order': self.bills[0].order_id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], self.bills[0].pk)

    def test_bulk_delete_partial_failure(self):
        services.lock_bill(self.actor, self.bills[1])
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/bills/bulk-delete/', {'ids': [b.pk for b in self.bills]}, format='json')
        self.assertEqual(response.data['succeeded'], 1)
        self.assertEqual(response.data['failed'], 1)
        self.assertEqual(response.data['message'], '1 succeeded, 1 failed')
        self.assertFalse(response.data['results'][1]['ok'])
