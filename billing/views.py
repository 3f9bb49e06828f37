from rest_framework import viewsets, mixins, permissions as drf_permissions, status, decorators
from rest_framework.response import Response
from .models import Bill
from .serializers import BillSerializer, BillFromOrderSerializer
from . import services
from accounts.context import resolve_auth_context
from accounts.permissions import IsAdminUser, IsAdminOrStaff
from core.bulk import run_bulk
from core.filters import parse_date_range, parse_id
from core.serializers import BulkIdsSerializer
from orders.services import get_order


class BillViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.DestroyModelMixin,
                  viewsets.GenericViewSet):
    """
    Bills are generated from delivered orders, never entered by hand.
    Distributor logins only see their own bills.
    """
    serializer_class = BillSerializer
    pagination_class = None

    def get_queryset(self):
        user = self.request.user
        queryset = Bill.objects.filter(is_void=False).select_related(
            'distributor', 'order'
        ).prefetch_related('items')
        if user.role == 'distributor':
            queryset = queryset.filter(distributor_id=user.distributor_id)
        else:
            distributor_id = parse_id(self.request.query_params, 'distributor')
            if distributor_id:
                queryset = queryset.filter(distributor_id=distributor_id)
        start, end = parse_date_range(self.request.query_params)
        if start:
            queryset = queryset.filter(bill_date__gte=start)
        if end:
            queryset = queryset.filter(bill_date__lte=end)
        locked = self.request.query_params.get('locked')
        if locked in ('true', 'false'):
            queryset = queryset.filter(locked=locked == 'true')
        return queryset.order_by('-created_at')

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            permission_classes = [drf_permissions.IsAuthenticated]
        elif self.action == 'from_order':
            permission_classes = [IsAdminOrStaff]
        else:
            permission_classes = [IsAdminUser]
        return [permission() for permission in permission_classes]

    def destroy(self, request, *args, **kwargs):
        bill = self.get_object()
        services.delete_bill(resolve_auth_context(request.user), bill)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @decorators.action(detail=False, methods=['post'], url_path='from-order')
    def from_order(self, request):
        """Generate, or regenerate while unlocked, the bill of a delivered order."""
        serializer = BillFromOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = get_order(serializer.validated_data['order'])
        bill = services.upsert_bill_from_order(resolve_auth_context(request.user), order)
        return Response(BillSerializer(bill).data)

    @decorators.action(detail=True, methods=['post'])
    def lock(self, request, pk=None):
        bill = services.lock_bill(resolve_auth_context(request.user), self.get_object())
        return Response(BillSerializer(bill).data)

    @decorators.action(detail=True, methods=['post'])
    def unlock(self, request, pk=None):
        bill = services.unlock_bill(resolve_auth_context(request.user), self.get_object())
        return Response(BillSerializer(bill).data)

    @decorators.action(detail=False, methods=['post'], url_path='bulk-delete')
    def bulk_delete(self, request):
        serializer = BulkIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = resolve_auth_context(request.user)
        outcome = run_bulk(
            serializer.validated_data['ids'],
            lambda pk: services.delete_bill(actor, services.get_bill(pk)),
        )
        return Response(outcome)

    @decorators.action(detail=False, methods=['post'])
    def reconcile(self, request):
        """Bill every delivered order that is still missing one."""
        outcome = services.reconcile_unbilled_orders(resolve_auth_context(request.user))
        return Response(outcome)
