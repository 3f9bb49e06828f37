from collections import defaultdict
from decimal import Decimal

from django.db.models import Sum, Count, Q
from django.utils import timezone
from rest_framework.views import APIView
from rest_framework.response import Response

from accounts.permissions import IsAdminUser, IsAdminOrStaff
from billing.models import Bill, BillItem
from billing.serializers import BillSerializer
from core.filters import parse_date_range, parse_id
from core.money import ZERO, round_money
from distributors.models import Distributor
from orders.models import Order
from payments.models import Payment
from payments.serializers import PaymentSerializer
from rest_framework import permissions as drf_permissions
from wallet import services as ledger


class MonthlyReportView(APIView):
    """
    Bills and payments in a period, as stored, with their totals.

    Period is ``month``+``year`` or ``start_date``/``end_date``. ``search``
    matches the distributor name or the bill number. Distributor logins
    only ever see their own records.
    """
    permission_classes = [drf_permissions.IsAuthenticated]

    def get(self, request):
        start, end = parse_date_range(request.query_params)
        bills = Bill.objects.filter(is_void=False).select_related('distributor', 'order').prefetch_related('items')
        payments = Payment.objects.filter(is_void=False).select_related('distributor', 'created_by')

        if request.user.role == 'distributor':
            bills = bills.filter(distributor_id=request.user.distributor_id)
            payments = payments.filter(distributor_id=request.user.distributor_id)
        distributor_id = parse_id(request.query_params, 'distributor')
        if distributor_id:
            bills = bills.filter(distributor_id=distributor_id)
            payments = payments.filter(distributor_id=distributor_id)
        if start:
            bills = bills.filter(bill_date__gte=start)
            payments = payments.filter(payment_date__gte=start)
        if end:
            bills = bills.filter(bill_date__lte=end)
            payments = payments.filter(payment_date__lte=end)

        search = request.query_params.get('search', '').strip()
        if search:
            bills = bills.filter(
                Q(distributor__distributor_name__icontains=search) | Q(bill_number__icontains=search)
            )
            payments = payments.filter(distributor__distributor_name__icontains=search)

        bills = bills.order_by('bill_date', 'id')
        payments = payments.order_by('payment_date', 'id')
        total_billed = bills.aggregate(total=Sum('total_amount'))['total'] or ZERO
        total_paid = payments.aggregate(total=Sum('amount'))['total'] or ZERO
        with_damage = bills.filter(total_damaged_amount__gt=0).count()

        return Response({
            'start_date': start,
            'end_date': end,
            'bills': BillSerializer(bills, many=True).data,
            'payments': PaymentSerializer(payments, many=True).data,
            'total_billed': round_money(total_billed),
            'total_paid': round_money(total_paid),
            'net': round_money(total_billed - total_paid),
            'bills_with_damage': with_damage,
            'bills_without_damage': bills.count() - with_damage,
        })


class AdminDashboardStatsView(APIView):
    permission_classes = [IsAdminOrStaff]

    def get(self, request):
        orders = Order.objects.filter(is_void=False)
        by_status = {row['status']: row['count'] for row in orders.values('status').annotate(count=Count('id'))}
        total_billed = Bill.objects.filter(is_void=False).aggregate(total=Sum('total_amount'))['total'] or ZERO
        total_paid = Payment.objects.filter(is_void=False).aggregate(total=Sum('amount'))['total'] or ZERO
        today = timezone.localdate()
        return Response({
            'total_orders': orders.count(),
            'pending_orders': by_status.get(Order.PENDING, 0),
            'delivered_orders': by_status.get(Order.DELIVERED, 0),
            'todays_orders': orders.filter(order_date=today).count(),
            'unbilled_orders': orders.filter(status=Order.DELIVERED, bill__isnull=True).count(),
            'total_distributors': Distributor.objects.count(),
            'active_distributors': Distributor.objects.filter(status=Distributor.ACTIVE).count(),
            'total_billed': round_money(total_billed),
            'total_paid': round_money(total_paid),
            'outstanding': round_money(total_billed - total_paid),
        })


class SalesByProductReport(APIView):
    """Billed quantity and value per product, net of damage."""
    permission_classes = [IsAdminOrStaff]

    def get(self, request):
        start, end = parse_date_range(request.query_params)
        qs = BillItem.objects.filter(bill__is_void=False)
        distributor_id = parse_id(request.query_params, 'distributor')
        if distributor_id:
            qs = qs.filter(bill__distributor_id=distributor_id)
        if start:
            qs = qs.filter(bill__bill_date__gte=start)
        if end:
            qs = qs.filter(bill__bill_date__lte=end)
        by_product = defaultdict(lambda: {'quantity': Decimal('0'), 'damaged': Decimal('0'), 'value': Decimal('0'), 'name': None})
        for item in qs:
            row = by_product[item.product_id]
            row['quantity'] += item.quantity
            row['damaged'] += item.damaged_quantity
            row['value'] += item.line_total
            row['name'] = item.product_name
        report = [
            {
                'product_id': pid,
                'product_name': data['name'],
                'quantity': data['quantity'],
                'damaged_quantity': data['damaged'],
                'value': round_money(data['value']),
            }
            for pid, data in by_product.items()
        ]
        report.sort(key=lambda x: -x['value'])
        return Response(report)


class OutstandingByDistributorReport(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        report = [ledger.get_wallet_snapshot(d.pk) for d in Distributor.objects.order_by('distributor_name')]
        report.sort(key=lambda x: -x['wallet_balance'])
        return Response(report)
