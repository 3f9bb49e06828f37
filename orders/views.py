from rest_framework import viewsets, permissions as drf_permissions, status, decorators
from rest_framework.response import Response
from .models import Order
from .serializers import OrderSerializer, OrderCreateSerializer, OrderUpdateSerializer, DeliverSerializer
from . import services
from accounts.context import resolve_auth_context
from accounts.permissions import IsAdminUser, IsAdminOrStaff, IsDistributorUser
from billing.serializers import BillSerializer
from core.bulk import run_bulk
from core.exceptions import NotFoundError, ValidationError
from core.filters import parse_date_range, parse_id
from core.serializers import BulkIdsSerializer


class OrderViewSet(viewsets.ModelViewSet):
    """
    Orders are placed and delivered by admin and staff. Distributor logins
    see their own orders and may confirm delivery of them.
    """
    serializer_class = OrderSerializer
    pagination_class = None

    def get_queryset(self):
        user = self.request.user
        queryset = Order.objects.filter(is_void=False).select_related(
            'distributor', 'ordered_by', 'bill'
        ).prefetch_related('items__product', 'damaged_products')
        if user.role == 'distributor':
            queryset = queryset.filter(distributor_id=user.distributor_id)
        else:
            distributor_id = parse_id(self.request.query_params, 'distributor')
            if distributor_id:
                queryset = queryset.filter(distributor_id=distributor_id)

        order_status = self.request.query_params.get('status')
        if order_status:
            queryset = queryset.filter(status=order_status)
        start, end = parse_date_range(self.request.query_params)
        if start:
            queryset = queryset.filter(order_date__gte=start)
        if end:
            queryset = queryset.filter(order_date__lte=end)
        return queryset.order_by('-created_at')

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            permission_classes = [drf_permissions.IsAuthenticated]
        elif self.action in ['tomorrow', 'distributor', 'confirm_delivery']:
            permission_classes = [IsDistributorUser]
        elif self.action in ['bulk_delete', 'bulk_deliver']:
            permission_classes = [IsAdminUser]
        else:
            permission_classes = [IsAdminOrStaff]
        return [permission() for permission in permission_classes]

    def _respond(self, order, status_code=status.HTTP_200_OK):
        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order).data, status=status_code)

    def create(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if data.get('distributor') is None:
            raise ValidationError({'distributor': 'This field is required.'})
        order = services.create_order(
            resolve_auth_context(request.user), data['distributor'], data['order_date'], data['items']
        )
        return self._respond(order, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        order = self.get_object()
        serializer = OrderUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = services.update_order(
            resolve_auth_context(request.user), order,
            order_date=data.get('order_date'), items=data.get('items'),
        )
        return self._respond(order)

    def destroy(self, request, *args, **kwargs):
        order = self.get_object()
        services.delete_order(resolve_auth_context(request.user), order)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _deliver(self, request, order):
        serializer = DeliverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order, bill = services.mark_delivered(
            resolve_auth_context(request.user), order,
            damaged_products=data.get('damaged_products'),
            delivery_date=data.get('delivery_date'),
            notes=data.get('notes'),
        )
        return Response({
            'message': 'Order delivered and bill generated.',
            'order': OrderSerializer(self.get_queryset().get(pk=order.pk)).data,
            'bill': BillSerializer(bill).data,
        })

    @decorators.action(detail=True, methods=['post'])
    def deliver(self, request, pk=None):
        return self._deliver(request, self.get_object())

    @decorators.action(detail=True, methods=['post'], url_path='confirm-delivery')
    def confirm_delivery(self, request, pk=None):
        """A distributor confirms one of its own orders has arrived."""
        order = self.get_object()
        if order.distributor_id != request.user.distributor_id:
            raise NotFoundError('Order not found.')
        return self._deliver(request, order)

    @decorators.action(detail=False, methods=['get'])
    def mine(self, request):
        queryset = self.get_queryset().filter(ordered_by=request.user)
        return Response(OrderSerializer(queryset, many=True).data)

    @decorators.action(detail=False, methods=['get'])
    def distributor(self, request):
        return Response(OrderSerializer(self.get_queryset(), many=True).data)

    @decorators.action(detail=False, methods=['get'])
    def tomorrow(self, request):
        orders = services.tomorrow_pending_orders(request.user.distributor_id)
        return Response(OrderSerializer(orders, many=True).data)

    @decorators.action(detail=False, methods=['post'], url_path='bulk-delete')
    def bulk_delete(self, request):
        serializer = BulkIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = resolve_auth_context(request.user)
        outcome = run_bulk(
            serializer.validated_data['ids'],
            lambda pk: services.delete_order(actor, services.get_order(pk)),
        )
        return Response(outcome)

    @decorators.action(detail=False, methods=['post'], url_path='bulk-deliver')
    def bulk_deliver(self, request):
        """Deliver several orders with no damage. Each order is billed on its own."""
        serializer = BulkIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = resolve_auth_context(request.user)
        outcome = run_bulk(
            serializer.validated_data['ids'],
            lambda pk: services.mark_delivered(actor, services.get_order(pk)),
        )
        return Response(outcome)
