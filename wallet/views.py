from rest_framework import generics
from rest_framework.response import Response
from rest_framework.views import APIView
from .models import LedgerEntry
from .serializers import LedgerEntrySerializer
from . import services
from accounts.permissions import IsAdminOrStaff, IsDistributorUser


class WalletView(APIView):
    """Balance of one distributor: active bills minus active payments."""
    permission_classes = [IsAdminOrStaff]

    def get(self, request, distributor_id):
        return Response(services.get_wallet_snapshot(distributor_id))


class MyWalletView(APIView):
    permission_classes = [IsDistributorUser]

    def get(self, request):
        return Response(services.get_wallet_snapshot(request.user.distributor_id))


class LedgerView(generics.ListAPIView):
    serializer_class = LedgerEntrySerializer
    permission_classes = [IsAdminOrStaff]
    pagination_class = None

    def get_queryset(self):
        distributor = services.get_distributor(self.kwargs['distributor_id'])
        return LedgerEntry.objects.filter(distributor=distributor).select_related('bill').order_by('id')
