from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'name', 'role', 'supplier', 'is_active']
    list_filter = ['role', 'is_active']
    search_fields = ['username', 'name', 'email']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Portal', {'fields': ('name', 'role', 'supplier', 'phone')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Portal', {'fields': ('name', 'role', 'supplier')}),
    )
