# apps/suppliers/admin.py
"""
Django admin configuration for suppliers.

Status changes should go through the block/activate API so the workflow
rules apply; the admin exposes status read-only.
"""
from django.contrib import admin
from .models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    """Admin interface for Supplier."""
    list_display = ['name', 'contact_name', 'contact_phone', 'status', 'rating', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'contact_name', 'contact_phone']
    readonly_fields = ['status', 'created_at', 'updated_at']

    fieldsets = [
        (None, {
            'fields': ['name', 'status', 'rating']
        }),
        ('Contact', {
            'fields': ['contact_name', 'contact_phone', 'address'],
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]
