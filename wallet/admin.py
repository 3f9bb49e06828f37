from django.contrib import admin
from .models import LedgerEntry


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = ('distributor', 'entry_type', 'amount', 'bill', 'payment', 'created_at')
    list_filter = ('entry_type',)

    # Entries are append-only.
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
