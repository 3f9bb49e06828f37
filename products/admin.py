from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'distributor', 'pack_quantity', 'pack_unit', 'cost_per_pack',
                    'cost_per_packet', 'packets_per_pack', 'is_active')
    list_filter = ('is_active', 'pack_unit', 'distributor')
    list_select_related = ('distributor',)
    search_fields = ('name', 'distributor__distributor_name')
