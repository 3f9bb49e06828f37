from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User


@admin.register(User)
class DairyUserAdmin(UserAdmin):
    list_display = ('username', 'role', 'distributor', 'is_active')
    list_filter = ('role', 'is_active')
    fieldsets = UserAdmin.fieldsets + (('Role', {'fields': ('role', 'phone', 'distributor')}),)
