from rest_framework import viewsets, mixins, permissions as drf_permissions, status, decorators
from rest_framework.response import Response
from .models import Payment
from .serializers import PaymentSerializer, PaymentCreateSerializer
from . import services
from accounts.context import resolve_auth_context
from accounts.permissions import IsAdminUser, IsAdminOrStaff
from core.bulk import run_bulk
from core.filters import parse_date_range, parse_id
from core.serializers import BulkIdsSerializer


class PaymentViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.CreateModelMixin,
                     mixins.DestroyModelMixin, viewsets.GenericViewSet):
    serializer_class = PaymentSerializer
    pagination_class = None

    def get_queryset(self):
        user = self.request.user
        queryset = Payment.objects.filter(is_void=False).select_related('distributor', 'created_by')
        if user.role == 'distributor':
            queryset = queryset.filter(distributor_id=user.distributor_id)
        else:
            distributor_id = parse_id(self.request.query_params, 'distributor')
            if distributor_id:
                queryset = queryset.filter(distributor_id=distributor_id)
        start, end = parse_date_range(self.request.query_params)
        if start:
            queryset = queryset.filter(payment_date__gte=start)
        if end:
            queryset = queryset.filter(payment_date__lte=end)
        method = self.request.query_params.get('payment_method')
        if method:
            queryset = queryset.filter(payment_method=services.normalize_method(method) or method)
        return queryset

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            permission_classes = [drf_permissions.IsAuthenticated]
        elif self.action == 'create':
            permission_classes = [IsAdminOrStaff]
        else:
            permission_classes = [IsAdminUser]
        return [permission() for permission in permission_classes]

    def create(self, request, *args, **kwargs):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        payment = services.create_payment(
            resolve_auth_context(request.user),
            data['distributor'],
            data['amount'],
            data['payment_method'],
            payment_date=data.get('payment_date'),
            receipt_image=data.get('receipt_image', ''),
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        payment = self.get_object()
        services.delete_payment(resolve_auth_context(request.user), payment)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @decorators.action(detail=False, methods=['post'], url_path='bulk-delete')
    def bulk_delete(self, request):
        serializer = BulkIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = resolve_auth_context(request.user)
        outcome = run_bulk(
            serializer.validated_data['ids'],
            lambda pk: services.delete_payment(actor, services.get_payment(pk)),
        )
        return Response(outcome)
