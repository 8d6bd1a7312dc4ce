# apps/sourcing/admin.py
from django.contrib import admin
from .models import Inquiry, Quotation


class QuotationInline(admin.TabularInline):
    model = Quotation
    extra = 0
    fields = ['supplier', 'material', 'quantity', 'unit_price', 'delivery_days', 'status']
    readonly_fields = ['status']
    raw_id_fields = ['supplier', 'material']


@admin.register(Inquiry)
class InquiryAdmin(admin.ModelAdmin):
    list_display = ['inquiry_number', 'title', 'status', 'deadline', 'created_at']
    list_filter = ['status']
    search_fields = ['inquiry_number', 'title']
    readonly_fields = ['inquiry_number', 'status', 'created_at', 'updated_at']
    inlines = [QuotationInline]


@admin.register(Quotation)
class QuotationAdmin(admin.ModelAdmin):
    list_display = ['inquiry', 'supplier', 'unit_price', 'delivery_days', 'status', 'order']
    list_filter = ['status']
    search_fields = ['inquiry__inquiry_number', 'supplier__name']
    readonly_fields = ['status', 'order', 'created_at', 'updated_at']
