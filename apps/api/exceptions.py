# apps/api/exceptions.py
"""
DRF exception handler giving every API error the same body.

Service code raises shared.exceptions.ServiceError subclasses; views never
catch them. Input, authentication and permission errors raised by DRF
itself are folded into the same shape:

    {"error": {"kind": "...", "message": "...", ...}}

Serializer errors keep the per-field messages under ``fields``.
"""
import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.exceptions import ServiceError

logger = logging.getLogger(__name__)

# Checked in order; AuthenticationFailed also covers simplejwt's InvalidToken
DRF_ERROR_KINDS = (
    (exceptions.ValidationError, 'validation_failed'),
    (exceptions.ParseError, 'validation_failed'),
    (exceptions.NotAuthenticated, 'not_authenticated'),
    (exceptions.AuthenticationFailed, 'not_authenticated'),
    (exceptions.PermissionDenied, 'forbidden'),
    (exceptions.NotFound, 'not_found'),
    (exceptions.MethodNotAllowed, 'method_not_allowed'),
)


def _first_message(detail):
    """Flatten the first message out of a nested serializer error detail."""
    if isinstance(detail, dict):
        if not detail:
            return None
        field, value = next(iter(detail.items()))
        message = _first_message(value)
        if message is None or field in ('detail', 'non_field_errors'):
            return message
        return f"{field}: {message}"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else None
    return str(detail)


def _drf_error(exc, response):
    kind = next(
        (kind for exc_class, kind in DRF_ERROR_KINDS if isinstance(exc, exc_class)),
        getattr(exc, 'default_code', 'error'),
    )
    error = {'kind': kind}
    if isinstance(exc, exceptions.ValidationError):
        error['message'] = _first_message(exc.detail) or 'Invalid input.'
        error['fields'] = response.data
    else:
        error['message'] = _first_message(exc.detail) or str(exc.default_detail)
    return error


def service_exception_handler(exc, context):
    view = context.get('view')
    view_name = type(view).__name__ if view else 'view'

    if isinstance(exc, ServiceError):
        logger.info(f"{view_name} rejected request: {exc.kind} ({exc.status_code}) {exc.message}")
        return Response({'error': exc.as_dict()}, status=exc.status_code)

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        return None

    error = _drf_error(exc, response)
    logger.info(f"{view_name} rejected request: {error['kind']} ({response.status_code}) {error['message']}")
    response.data = {'error': error}
    return response
