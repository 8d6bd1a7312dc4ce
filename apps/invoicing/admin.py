# apps/invoicing/admin.py
"""
Django admin configuration for reconciliations and invoices.
"""
from django.contrib import admin
from .models import Invoice, Reconciliation


class InvoiceInline(admin.TabularInline):
    model = Invoice
    extra = 0
    fields = ['invoice_no', 'invoice_date', 'amount', 'tax_amount', 'status']
    readonly_fields = ['status']


@admin.register(Reconciliation)
class ReconciliationAdmin(admin.ModelAdmin):
    list_display = ['reconciliation_number', 'supplier', 'period_start', 'period_end', 'total_amount', 'status']
    list_filter = ['status']
    search_fields = ['reconciliation_number', 'supplier__name']
    readonly_fields = ['reconciliation_number', 'total_amount', 'status', 'created_at', 'updated_at']
    inlines = [InvoiceInline]


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_no', 'supplier', 'invoice_date', 'amount', 'tax_amount', 'status']
    list_filter = ['status', 'invoice_date']
    search_fields = ['invoice_no', 'supplier__name']
    readonly_fields = ['status', 'created_at', 'updated_at']
