from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/accounts/', include('accounts.urls')),
    path('api/distributors/', include('distributors.urls')),
    path('api/products/', include('products.urls')),
    path('api/orders/', include('orders.urls')),
    path('api/bills/', include('billing.urls')),
    path('api/payments/', include('payments.urls')),
    path('api/wallet/', include('wallet.urls')),
    path('api/reports/', include('reports.urls')),
    path('api/contact-details/', include('contacts.urls')),
]
