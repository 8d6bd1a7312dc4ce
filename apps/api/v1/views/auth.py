# apps/api/v1/views/auth.py
"""
JWT login, refresh, logout and password change.

Tokens are returned in the response body for API clients and also set as
httpOnly cookies for browser clients (read by CookieJWTAuthentication).
"""
import logging

from django.conf import settings
from django.contrib.auth import update_session_auth_hash
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.views import TokenObtainPairView

from apps.api.authentication import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE

from ..serializers import ChangePasswordSerializer

logger = logging.getLogger(__name__)


def _get_cookie_settings():
    """Get cookie settings based on DEBUG mode."""
    return {
        'httponly': True,
        'secure': not settings.DEBUG,
        'samesite': 'Lax',
        'path': '/',
    }


def _set_token_cookies(response, access=None, refresh=None):
    lifetimes = settings.SIMPLE_JWT
    cookie_settings = _get_cookie_settings()
    if access:
        response.set_cookie(
            ACCESS_TOKEN_COOKIE, access,
            max_age=int(lifetimes['ACCESS_TOKEN_LIFETIME'].total_seconds()),
            **cookie_settings
        )
    if refresh:
        response.set_cookie(
            REFRESH_TOKEN_COOKIE, refresh,
            max_age=int(lifetimes['REFRESH_TOKEN_LIFETIME'].total_seconds()),
            **cookie_settings
        )


class LoginView(TokenObtainPairView):
    """
    POST /api/v1/auth/login/
    Body: { "username": "...", "password": "..." }
    """

    @extend_schema(
        tags=['auth'],
        summary='Login and receive JWT tokens',
        description='Authenticate with username/password. Tokens are returned and set as httpOnly cookies.',
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0])

        user = serializer.user
        access = serializer.validated_data['access']
        refresh = serializer.validated_data['refresh']
        logger.info(f"User {user.username} logged in")

        response = Response({
            'access': access,
            'refresh': refresh,
            'user': {
                'id': user.id,
                'username': user.username,
                'role': user.role,
                'supplier': user.supplier_id,
            },
        })
        _set_token_cookies(response, access, refresh)
        return response


class RefreshView(APIView):
    """
    POST /api/v1/auth/refresh/
    Body: { "refresh": "..." } or the refresh cookie.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        tags=['auth'],
        summary='Refresh the access token',
        request=TokenRefreshSerializer,
        responses=TokenRefreshSerializer,
    )
    def post(self, request, *args, **kwargs):
        refresh = request.data.get('refresh') or request.COOKIES.get(REFRESH_TOKEN_COOKIE)
        if not refresh:
            return Response(
                {'error': {'kind': 'not_authenticated', 'message': 'No refresh token provided.'}},
                status=status.HTTP_401_UNAUTHORIZED
            )

        serializer = TokenRefreshSerializer(data={'refresh': refresh})
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError:
            return Response(
                {'error': {'kind': 'not_authenticated', 'message': 'Invalid or expired refresh token.'}},
                status=status.HTTP_401_UNAUTHORIZED
            )

        response = Response(serializer.validated_data)
        _set_token_cookies(
            response,
            serializer.validated_data['access'],
            serializer.validated_data.get('refresh'),
        )
        return response


class LogoutView(APIView):
    """
    Logout by clearing the JWT cookies.

    POST /api/v1/auth/logout/

    Works without a valid access token so an expired cookie session can
    still be cleared. Tokens held by API clients stay valid until expiry.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=['auth'], summary='Logout and clear JWT cookies', request=None)
    def post(self, request, *args, **kwargs):
        response = Response({'message': 'Logged out successfully'})
        response.delete_cookie(ACCESS_TOKEN_COOKIE, path='/', samesite='Lax')
        response.delete_cookie(REFRESH_TOKEN_COOKIE, path='/', samesite='Lax')
        return response


class ChangePasswordView(APIView):
    """
    POST /api/v1/auth/change-password/
    Body: { "current_password": "...", "new_password": "..." }
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=['auth'], summary='Change the current user password', request=ChangePasswordSerializer)
    def post(self, request, *args, **kwargs):
        serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password'])
        update_session_auth_hash(request, user)
        logger.info(f"User {user.username} changed their password")
        return Response({'message': 'Password changed successfully'})
