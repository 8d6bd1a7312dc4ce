# shared/exceptions.py
"""
Service-layer exceptions shared by every app.

Each error carries a stable ``kind`` for programmatic handling and a
human-readable message. The API layer maps ``status_code`` onto the HTTP
response; services never build responses themselves.

Usage:
    from shared.exceptions import NotFound

    raise NotFound(f"Order {order_id} does not exist.")
"""


class ServiceError(Exception):
    """Base exception for business-rule failures."""
    kind = 'service_error'
    status_code = 400

    def __init__(self, message=None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self):
        return 'The request could not be processed.'

    def as_dict(self):
        return {'kind': self.kind, 'message': self.message}


class ValidationFailed(ServiceError):
    """Raised when input is missing or invalid."""
    kind = 'validation_failed'
    status_code = 400


class NotFound(ServiceError):
    """Raised when a referenced record does not exist."""
    kind = 'not_found'
    status_code = 404

    def default_message(self):
        return 'Not found.'


class Forbidden(ServiceError):
    """Raised when the actor may not operate on the record."""
    kind = 'forbidden'
    status_code = 403

    def default_message(self):
        return 'You do not have permission to perform this action.'


class InvalidTransition(ServiceError):
    """Raised when an operation is not legal from the record's current status."""
    kind = 'invalid_transition'
    status_code = 409

    def __init__(self, current_status, operation, message=None):
        self.current_status = current_status
        self.operation = operation
        super().__init__(
            message or f"Cannot {operation} when status is '{current_status}'."
        )

    def as_dict(self):
        data = super().as_dict()
        data['current_status'] = self.current_status
        data['operation'] = self.operation
        return data
