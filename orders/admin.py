from django.contrib import admin
from .models import Order, OrderItem, DamagedProduct


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


class DamagedProductInline(admin.TabularInline):
    model = DamagedProduct
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'distributor', 'order_date', 'status', 'locked', 'total_amount', 'is_void')
    list_filter = ('status', 'locked', 'is_void')
    inlines = [OrderItemInline, DamagedProductInline]
