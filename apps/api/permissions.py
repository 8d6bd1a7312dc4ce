# apps/api/permissions.py
"""
Role-based permissions for the REST API.

Users carry a single role (admin, purchaser, supplier, finance). These
classes gate whole endpoints by role; per-record rules (a supplier user may
only touch its own supplier's orders) are enforced by the services.
"""
from rest_framework import permissions

from users.models import PURCHASING_ROLES


class HasRole(permissions.BasePermission):
    """Base class for role-based permissions."""
    roles = frozenset()

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.user.is_superuser:
            return True
        return getattr(request.user, 'role', None) in self.roles


class IsPurchasing(HasRole):
    """User is a purchaser or admin."""
    message = "Only purchasing staff can do this."
    roles = PURCHASING_ROLES


class ReadOnlyOrPurchasing(permissions.BasePermission):
    """
    Allow read-only access to all authenticated users,
    but only allow write access to purchasing staff.
    """
    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return IsPurchasing().has_permission(request, view)
