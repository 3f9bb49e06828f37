from django.db.models import ProtectedError
from rest_framework import viewsets, filters, decorators
from rest_framework.response import Response
from .models import Product
from .serializers import ProductSerializer
from accounts.permissions import IsAdminUser
from rest_framework import permissions as drf_permissions
from core.exceptions import ConflictError, ValidationError
from core.filters import parse_id
from core.money import fits_money_field, to_decimal


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    filter_backends = [filters.SearchFilter]
    search_fields = ['name', 'distributor__distributor_name', 'distributor__company_name']
    pagination_class = None

    def get_queryset(self):
        user = self.request.user
        queryset = Product.objects.select_related('distributor').order_by('-id')
        if user.role == 'distributor':
            return queryset.filter(distributor=user.distributor)
        distributor_id = parse_id(self.request.query_params, 'distributor')
        if distributor_id:
            queryset = queryset.filter(distributor_id=distributor_id)
        if user.role != 'admin':
            queryset = queryset.filter(is_active=True)
        return queryset

    def get_permissions(self):
        if self.action in ['list', 'retrieve', 'cost']:
            permission_classes = [drf_permissions.IsAuthenticated]
        else:
            permission_classes = [IsAdminUser]
        return [permission() for permission in permission_classes]

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise ConflictError('Product is used by existing orders; deactivate it instead.')

    @decorators.action(detail=True, methods=['get'])
    def cost(self, request, pk=None):
        """Cost of ordering ``packs`` packs of this product."""
        product = self.get_object()
        try:
            packs = to_decimal(request.query_params.get('packs', 1))
        except ArithmeticError:
            raise ValidationError({'packs': 'Must be a number.'})
        if not packs.is_finite():
            raise ValidationError({'packs': 'Must be a number.'})
        if packs <= 0:
            raise ValidationError({'packs': 'Must be greater than 0.'})
        if not fits_money_field((product.price_per_pack or 0) * packs):
            raise ValidationError({'packs': 'Too many packs.'})
        return Response({
            'product': product.name,
            'packs': packs,
            'price_per_pack': product.price_per_pack,
            'total_cost': product.calculate_cost(packs),
        })
