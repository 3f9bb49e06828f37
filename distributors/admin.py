from django.contrib import admin
from .models import Distributor


@admin.register(Distributor)
class DistributorAdmin(admin.ModelAdmin):
    list_display = ('distributor_name', 'company_name', 'contact', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('distributor_name', 'company_name')
