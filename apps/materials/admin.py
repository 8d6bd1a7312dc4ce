# apps/materials/admin.py
"""
Django admin configuration for the material catalog.
"""
from django.contrib import admin
from .models import Material


@admin.register(Material)
class MaterialAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'unit', 'category', 'created_at']
    list_filter = ['category']
    search_fields = ['code', 'name', 'specification']
    readonly_fields = ['created_at', 'updated_at']
