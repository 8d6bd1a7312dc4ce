# apps/api/v1/views/health.py
"""Liveness check for load balancers: GET /api/v1/health/ (no auth)."""
import logging

from django.db import DatabaseError, connection
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


@extend_schema(tags=['health'], summary='Service health')
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    try:
        connection.ensure_connection()
    except DatabaseError as e:
        logger.error(f"Health check cannot reach the database: {e}")
        return Response(
            {'status': 'unhealthy', 'database': type(e).__name__, 'vendor': connection.vendor},
            status=503,
        )
    return Response({'status': 'healthy', 'database': 'connected', 'vendor': connection.vendor})
