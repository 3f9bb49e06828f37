from django.urls import path
from .views import WalletView, MyWalletView, LedgerView

urlpatterns = [
    path('me/', MyWalletView.as_view(), name='my_wallet'),
    path('<int:distributor_id>/', WalletView.as_view(), name='wallet'),
    path('<int:distributor_id>/ledger/', LedgerView.as_view(), name='wallet_ledger'),
]
