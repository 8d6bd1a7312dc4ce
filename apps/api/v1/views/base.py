# apps/api/v1/views/base.py
"""
Base classes for service-backed API views.

Views stay thin: they parse input with a serializer, call a service built
for the requesting user, and serialize the result. Service errors are
rendered by apps.api.exceptions.service_exception_handler.
"""
from rest_framework import viewsets


class ServiceViewSetMixin:
    """
    Builds the view's service for the current user.

    Usage:
        class OrderViewSet(ServiceViewSetMixin, viewsets.ViewSet):
            service_class = OrderService

            def create(self, request):
                order = self.get_service().create_order(...)
    """
    service_class = None
    lookup_value_regex = r'[0-9]+'

    def get_service(self):
        if self.service_class is None:
            raise NotImplementedError(
                f"{self.__class__.__name__} must define 'service_class' attribute"
            )
        return self.service_class(self.request.user)

    def parse(self, serializer_class, data=None, partial=False):
        """Validate request data against ``serializer_class`` and return validated_data."""
        serializer = serializer_class(
            data=self.request.data if data is None else data,
            partial=partial,
            context={'request': self.request},
        )
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data


class ServiceGenericViewSet(ServiceViewSetMixin, viewsets.GenericViewSet):
    """GenericViewSet whose list queryset comes from the service."""
