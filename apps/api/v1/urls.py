# apps/api/v1/urls.py
"""
URL routing for API v1.

All API endpoints are mounted under /api/v1/
"""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    ChangePasswordView, CurrentUserView, InquiryViewSet, InvoiceViewSet, LoginView, LogoutView,
    MaterialViewSet, NotificationViewSet, OrderViewSet, QuotationViewSet, ReconciliationViewSet,
    RefreshView, SupplierViewSet, health_check,
)

router = DefaultRouter()

# Master data
router.register(r'suppliers', SupplierViewSet, basename='supplier')
router.register(r'materials', MaterialViewSet, basename='material')

# Orders
router.register(r'orders', OrderViewSet, basename='order')

# Sourcing
router.register(r'inquiries', InquiryViewSet, basename='inquiry')
router.register(r'quotations', QuotationViewSet, basename='quotation')

# Settlement
router.register(r'reconciliations', ReconciliationViewSet, basename='reconciliation')
router.register(r'invoices', InvoiceViewSet, basename='invoice')

# Inbox
router.register(r'notifications', NotificationViewSet, basename='notification')

urlpatterns = [
    path('auth/login/', LoginView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', RefreshView.as_view(), name='token_refresh'),
    path('auth/logout/', LogoutView.as_view(), name='logout'),
    path('auth/change-password/', ChangePasswordView.as_view(), name='change-password'),
    path('users/me/', CurrentUserView.as_view(), name='current-user'),
    path('health/', health_check, name='health-check'),
    path('', include(router.urls)),
]
