import datetime
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from billing.models import Bill
from billing.services import delete_bill
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.factories import make_distributor, make_product, make_user, actor_for, line, today
from .models import Order, DamagedProduct
from . import services


class OrderPlacementTest(TestCase):
    def setUp(self):
        self.staff = make_user('staff', role='staff')
        self.actor = actor_for(self.staff)
        self.distributor = make_distributor()
        self.milk = make_product(self.distributor, 'Toned Milk', '50.00')
        self.curd = make_product(self.distributor, 'Curd', '20.00')

    def test_new_order_is_pending_and_unlocked(self):
        order = services.create_order(self.actor, self.distributor.pk, today(), [line(self.milk, 10), line(self.curd, 5)])
        order.refresh_from_db()
        self.assertEqual(order.status, Order.PENDING)
        self.assertFalse(order.locked)
        self.assertEqual(order.items.count(), 2)
        self.assertEqual(order.total_amount, Decimal('600.00'))
        self.assertEqual(order.ordered_by, self.staff)
        self.assertEqual(order.ordered_by_role, 'staff')
        self.assertTrue(order.order_number.startswith('ORD-'))

    def test_item_price_is_snapshotted(self):
        order = services.create_order(self.actor, self.distributor.pk, today(), [line(self.milk, 2)])
        self.milk.cost_per_pack = Decimal('75.00')
        self.milk.save()
        self.assertEqual(order.items.get().unit_price, Decimal('50.00'))

    def test_price_falls_back_to_packet_price(self):
        butter = make_product(self.distributor, 'Butter', None, cost_per_packet=Decimal('12.50'), packets_per_pack=4)
        order = services.create_order(self.actor, self.distributor.pk, today(), [line(butter, 2)])
        self.assertEqual(order.items.get().unit_price, Decimal('50.00'))

    def test_unknown_distributor(self):
        with self.assertRaises(NotFoundError):
            services.create_order(self.actor, 9999, today(), [line(self.milk, 1)])

    def test_past_order_date_is_rejected(self):
        yesterday = today() - datetime.timedelta(days=1)
        with self.assertRaises(ValidationError):
            services.create_order(self.actor, self.distributor.pk, yesterday, [line(self.milk, 1)])

    def test_empty_items_are_rejected(self):
        with self.assertRaises(ValidationError):
            services.create_order(self.actor, self.distributor.pk, today(), [])

    def test_product_of_another_distributor_is_rejected(self):
        other = make_product(make_distributor('Amul Point'), 'Paneer', '90.00')
        with self.assertRaises(ValidationError):
            services.create_order(self.actor, self.distributor.pk, today(), [line(other, 1)])

    def test_missing_product(self):
        with self.assertRaises(NotFoundError):
            services.create_order(self.actor, self.distributor.pk, today(),
                                  [{'product': 9999, 'quantity': Decimal('1'), 'unit': 'pack'}])

    def test_quantity_and_unit_are_validated(self):
        with self.assertRaises(ValidationError):
            services.create_order(self.actor, self.distributor.pk, today(), [line(self.milk, 0)])
        with self.assertRaises(ValidationError):
            services.create_order(self.actor, self.distributor.pk, today(), [line(self.milk, 1, unit='dozen')])
        self.assertEqual(Order.objects.count(), 0)

    def test_inactive_product_cannot_be_ordered(self):
        self.milk.is_active = False
        self.milk.save()
        with self.assertRaises(ValidationError):
            services.create_order(self.actor, self.distributor.pk, today(), [line(self.milk, 1)])


class OrderLifecycleTest(TestCase):
    def setUp(self):
        self.admin = make_user('admin')
        self.actor = actor_for(self.admin)
        self.distributor = make_distributor()
        self.milk = make_product(self.distributor, 'Toned Milk', '50.00')
        self.curd = make_product(self.distributor, 'Curd', '20.00')
        self.order = services.create_order(self.actor, self.distributor.pk, today(),
                                           [line(self.milk, 10), line(self.curd, 5)])

    def test_update_pending_order_replaces_items(self):
        order = services.update_order(self.actor, self.order, items=[line(self.curd, 3)])
        order.refresh_from_db()
        self.assertEqual(order.items.count(), 1)
        self.assertEqual(order.total_amount, Decimal('60.00'))
        self.assertEqual(order.updated_by_name, 'admin')
        self.assertEqual(order.updated_by_role, 'admin')

    def test_update_keeps_unchanged_past_order_date(self):
        yesterday = today() - datetime.timedelta(days=1)
        Order.objects.filter(pk=self.order.pk).update(order_date=yesterday)
        self.order.refresh_from_db()
        order = services.update_order(self.actor, self.order, order_date=yesterday, items=[line(self.curd, 2)])
        order.refresh_from_db()
        self.assertEqual(order.order_date, yesterday)
        self.assertEqual(order.total_amount, Decimal('40.00'))

    def test_update_to_another_past_date_is_rejected(self):
        with self.assertRaises(ValidationError):
            services.update_order(self.actor, self.order, order_date=today() - datetime.timedelta(days=2))

    def test_update_delivered_order_conflicts(self):
        services.mark_delivered(self.actor, self.order)
        self.order.refresh_from_db()
        with self.assertRaises(ConflictError):
            services.update_order(self.actor, self.order, items=[line(self.curd, 1)])

    def test_deliver_twice_conflicts(self):
        order, bill = services.mark_delivered(self.actor, self.order)
        self.assertEqual(order.status, Order.DELIVERED)
        self.assertTrue(order.locked)
        self.assertEqual(order.delivery_date, today())
        self.assertEqual(bill.total_amount, Decimal('600.00'))
        with self.assertRaises(ConflictError):
            services.mark_delivered(self.actor, order)

    def test_delivery_records_damage(self):
        order, bill = services.mark_delivered(
            self.actor, self.order,
            damaged_products=[{'product': self.milk.pk, 'damaged_quantity': Decimal('2'), 'notes': 'leaking'}],
            notes='Crate dropped at gate',
        )
        damage = DamagedProduct.objects.get(order=order)
        self.assertEqual(damage.product_name, 'Toned Milk')
        self.assertEqual(damage.damaged_quantity, Decimal('2'))
        self.assertEqual(order.distributor_notes, 'Crate dropped at gate')
        self.assertEqual(bill.total_amount, Decimal('500.00'))

    def test_damage_for_product_outside_order_is_rejected(self):
        ghee = make_product(self.distributor, 'Ghee', '300.00')
        with self.assertRaises(ValidationError):
            services.mark_delivered(self.actor, self.order,
                                    damaged_products=[{'product': ghee.pk, 'damaged_quantity': Decimal('1')}])
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.PENDING)

    def test_failed_billing_leaves_order_pending(self):
        with mock.patch('orders.services.upsert_bill_from_order', side_effect=ConflictError('boom')):
            with self.assertRaises(ConflictError):
                services.mark_delivered(self.actor, self.order)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.PENDING)
        self.assertFalse(self.order.locked)
        self.assertFalse(Bill.objects.exists())

    def test_delete_pending_order_removes_it(self):
        services.delete_order(self.actor, self.order)
        self.assertFalse(Order.objects.filter(pk=self.order.pk).exists())

    def test_delete_delivered_order_needs_bill_voided_first(self):
        order, bill = services.mark_delivered(self.actor, self.order)
        with self.assertRaises(ConflictError):
            services.delete_order(self.actor, order)
        delete_bill(self.actor, bill)
        services.delete_order(self.actor, order)
        order.refresh_from_db()
        self.assertTrue(order.is_void)
        with self.assertRaises(NotFoundError):
            services.get_order(order.pk)

    def test_tomorrow_pending_orders(self):
        tomorrow = today() + datetime.timedelta(days=1)
        later = services.create_order(self.actor, self.distributor.pk, tomorrow, [line(self.milk, 1)])
        pending = list(services.tomorrow_pending_orders(self.distributor.pk))
        self.assertEqual(pending, [later])


class OrderApiTest(APITestCase):
    def setUp(self):
        self.staff = make_user('staff', role='staff')
        self.admin = make_user('admin')
        self.distributor = make_distributor()
        self.other = make_distributor('Amul Point')
        self.dist_user = make_user('gokul', role='distributor', distributor=self.distributor)
        self.milk = make_product(self.distributor, 'Toned Milk', '50.00')
        self.paneer = make_product(self.other, 'Paneer', '90.00')

    def _place(self, distributor, product, quantity='4'):
        self.client.force_authenticate(self.staff)
        return self.client.post('/api/orders/', {
            'distributor': distributor.pk,
            'order_date': today().isoformat(),
            'items': [{'product_id': product.pk, 'quantity': quantity, 'unit': 'pack'}],
        }, format='json')

    def test_staff_places_order(self):
        response = self._place(self.distributor, self.milk)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['total_amount'], '200.00')
        self.assertEqual(response.data['items'][0]['product'], self.milk.pk)

    def test_distributor_cannot_place_orders(self):
        self.client.force_authenticate(self.dist_user)
        response = self.client.post('/api/orders/', {
            'distributor': self.distributor.pk, 'order_date': today().isoformat(), 'items': [],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_validation_errors_use_error_envelope(self):
        response = self._place(self.distributor, self.paneer)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('does not belong', response.data['error'])

    def test_malformed_distributor_filter_is_a_validation_error(self):
        self.client.force_authenticate(self.staff)
        for value in ('abc', '1.5', '-2'):
            response = self.client.get('/api/orders/', {'distributor': value})
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, value)
            self.assertIn('distributor', response.data['detail'])

    def test_distributor_filter(self):
        self._place(self.distributor, self.milk)
        response = self.client.get('/api/orders/', {'distributor': str(self.other.pk)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_distributor_sees_only_own_orders(self):
        self._place(self.distributor, self.milk)
        self._place(self.other, self.paneer)
        self.client.force_authenticate(self.dist_user)
        response = self.client.get('/api/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([o['distributor'] for o in response.data], [self.distributor.pk])

    def test_mine_lists_orders_placed_by_user(self):
        self._place(self.distributor, self.milk)
        self.client.force_authenticate(self.admin)
        self.assertEqual(len(self.client.get('/api/orders/mine/').data), 0)
        self.client.force_authenticate(self.staff)
        self.assertEqual(len(self.client.get('/api/orders/mine/').data), 1)

    def test_deliver_returns_order_and_bill(self):
        order_id = self._place(self.distributor, self.milk).data['id']
        response = self.client.post(f'/api/orders/{order_id}/deliver/', {
            'damaged_products': [{'product': self.milk.pk, 'damaged_packets': '1'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['order']['status'], 'delivered')
        self.assertEqual(response.data['bill']['total_amount'], '150.00')

        again = self.client.post(f'/api/orders/{order_id}/deliver/', {}, format='json')
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)

    def test_distributor_confirms_own_delivery_only(self):
        own_id = self._place(self.distributor, self.milk).data['id']
        other_id = self._place(self.other, self.paneer).data['id']
        self.client.force_authenticate(self.dist_user)
        response = self.client.post(f'/api/orders/{own_id}/confirm-delivery/', {'notes': 'All good'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['order']['distributor_notes'], 'All good')
        response = self.client.post(f'/api/orders/{other_id}/confirm-delivery/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_bulk_delete_reports_partial_failure(self):
        pending_id = self._place(self.distributor, self.milk).data['id']
        delivered_id = self._place(self.distributor, self.milk).data['id']
        self.client.post(f'/api/orders/{delivered_id}/deliver/', {}, format='json')

        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/orders/bulk-delete/', {'ids': [pending_id, delivered_id, 9999]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['succeeded'], 1)
        self.assertEqual(response.data['failed'], 2)
        outcome = {r['id']: r for r in response.data['results']}
        self.assertTrue(outcome[pending_id]['ok'])
        self.assertIn('active bill', outcome[delivered_id]['error'])
        self.assertEqual(outcome[9999]['error'], 'Order not found.')

    def test_bulk_deliver(self):
        first = self._place(self.distributor, self.milk).data['id']
        second = self._place(self.distributor, self.milk).data['id']
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/orders/bulk-deliver/', {'ids': [first, second]}, format='json')
        self.assertEqual(response.data['succeeded'], 2)
        self.assertEqual(Bill.objects.filter(is_void=False).count(), 2)
