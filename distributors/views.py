from django.db.models import ProtectedError
from rest_framework import viewsets, filters, decorators
from rest_framework.response import Response
from .models import Distributor
from .serializers import DistributorSerializer
from accounts.permissions import IsAdminUser, IsAdminOrStaff, IsDistributorUser
from billing.models import Bill
from billing.serializers import BillSerializer
from core.exceptions import ConflictError
from orders.models import Order
from orders.serializers import OrderSerializer
from payments.models import Payment
from payments.serializers import PaymentSerializer
from wallet import services as ledger


class DistributorViewSet(viewsets.ModelViewSet):
    serializer_class = DistributorSerializer
    filter_backends = [filters.SearchFilter]
    search_fields = ['distributor_name', 'company_name', 'contact']
    pagination_class = None

    def get_queryset(self):
        queryset = Distributor.objects.all().order_by('distributor_name')
        status = self.request.query_params.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def get_permissions(self):
        if self.action in ['list', 'retrieve', 'overview']:
            permission_classes = [IsAdminOrStaff]
        elif self.action == 'profile':
            permission_classes = [IsDistributorUser]
        else:
            permission_classes = [IsAdminUser]
        return [permission() for permission in permission_classes]

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise ConflictError('Distributor has orders, bills or payments and cannot be deleted; mark it inactive instead.')

    @decorators.action(detail=False, methods=['get'])
    def profile(self, request):
        """The distributor record of the logged-in distributor."""
        return Response(DistributorSerializer(request.user.distributor).data)

    @decorators.action(detail=True, methods=['get'])
    def overview(self, request, pk=None):
        """Everything recorded against one distributor, with its balance."""
        distributor = self.get_object()
        orders = Order.objects.filter(distributor=distributor, is_void=False).select_related(
            'distributor', 'ordered_by', 'bill'
        ).prefetch_related('items__product', 'damaged_products')
        bills = Bill.objects.filter(distributor=distributor, is_void=False).select_related(
            'distributor', 'order'
        ).prefetch_related('items')
        payments = Payment.objects.filter(distributor=distributor, is_void=False).select_related(
            'distributor', 'created_by'
        )
        return Response({
            'distributor': DistributorSerializer(distributor).data,
            'orders': OrderSerializer(orders, many=True).data,
            'bills': BillSerializer(bills, many=True).data,
            'payments': PaymentSerializer(payments, many=True).data,
            'wallet': ledger.get_wallet_snapshot(distributor.pk),
        })
