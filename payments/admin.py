from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('distributor', 'amount', 'payment_method', 'payment_date', 'is_void')
    list_filter = ('payment_method', 'is_void')
    search_fields = ('distributor__distributor_name',)
