from django.contrib import admin
from .models import Bill, BillItem


class BillItemInline(admin.TabularInline):
    model = BillItem
    extra = 0
    can_delete = False


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('bill_number', 'distributor', 'order', 'bill_date', 'total_amount', 'locked', 'is_void')
    list_filter = ('locked', 'is_void')
    search_fields = ('bill_number', 'distributor__distributor_name')
    readonly_fields = ('subtotal', 'total_damaged_amount', 'total_amount')
    inlines = [BillItemInline]
