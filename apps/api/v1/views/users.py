# apps/api/v1/views/users.py
"""User profile endpoint."""
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ..serializers import CurrentUserSerializer


class CurrentUserView(APIView):
    """
    GET /api/v1/users/me/

    Returns the authenticated user's profile including role and supplier.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=['users'], summary='Current user profile', responses=CurrentUserSerializer)
    def get(self, request):
        return Response(CurrentUserSerializer(request.user).data)
