# shared/middleware.py
"""
Request logging middleware.

Tags every request with an ID (taken from X-Request-ID when the proxy sets
one) and writes one access line per API call to the ``srm.requests`` logger.
"""
import logging
import time
import uuid

logger = logging.getLogger('srm.requests')

REQUEST_ID_HEADER = 'HTTP_X_REQUEST_ID'


class RequestLoggingMiddleware:
    """
    Log method, path, status and duration for requests under /api/.

    The request ID is stored on ``request.request_id`` and echoed back in the
    X-Request-ID response header so client errors can be matched to log lines.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.request_id = request.META.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        started = time.monotonic()

        response = self.get_response(request)

        response['X-Request-ID'] = request.request_id
        if request.path.startswith('/api/'):
            elapsed_ms = (time.monotonic() - started) * 1000
            user = getattr(request, 'user', None)
            username = user.username if user is not None and user.is_authenticated else '-'
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                f"{request.method} {request.path} -> {response.status_code} "
                f"({elapsed_ms:.1f} ms, user={username}, request_id={request.request_id})"
            )
        return response
