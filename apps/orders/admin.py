# apps/orders/admin.py
"""
Django admin configuration for Order models.

Status and log rows are owned by OrderService, so the admin shows them
read-only. OrderLog entries are append-only and cannot be edited or deleted.
"""
from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin
from .models import Order, OrderLog


class OrderLogInline(admin.TabularInline):
    """Read-only timeline on the order page."""
    model = OrderLog
    extra = 0
    can_delete = False
    fields = ['created_at', 'action', 'old_status', 'new_status', 'operator', 'remark']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(SimpleHistoryAdmin):
    """Admin interface for Order with history tracking."""
    list_display = [
        'order_number', 'supplier', 'material', 'quantity', 'unit_price',
        'total_amount', 'status', 'delivery_date', 'created_at'
    ]
    list_filter = ['status', 'delivery_date', 'created_at']
    search_fields = ['order_number', 'supplier__name', 'material__name', 'material__code']
    readonly_fields = ['order_number', 'status', 'tracking_no', 'total_amount', 'created_at', 'updated_at']
    raw_id_fields = ['supplier', 'material', 'created_by']
    date_hierarchy = 'created_at'
    inlines = [OrderLogInline]

    fieldsets = [
        (None, {
            'fields': ['order_number', 'supplier', 'material', 'status']
        }),
        ('Amounts', {
            'fields': ['quantity', 'unit_price', 'total_amount']
        }),
        ('Delivery', {
            'fields': ['delivery_date', 'tracking_no']
        }),
        ('Notes', {
            'fields': ['notes', 'created_by'],
            'classes': ['collapse']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(OrderLog)
class OrderLogAdmin(admin.ModelAdmin):
    list_display = ['order', 'action', 'old_status', 'new_status', 'operator', 'created_at']
    list_filter = ['action', 'new_status']
    search_fields = ['order__order_number', 'remark']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
