from django.contrib import admin
from .models import ContactDetails


@admin.register(ContactDetails)
class ContactDetailsAdmin(admin.ModelAdmin):
    list_display = ('admin_name', 'admin_contact', 'staff_name', 'staff_contact', 'updated_at')
    search_fields = ('admin_name', 'staff_name', 'admin_email')
