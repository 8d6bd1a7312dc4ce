# shared/numbering.py
"""
Human-readable document numbers.

Format: <prefix><yyyy><mm><4-digit suffix>, e.g. ``PO2026100042``.
The suffix is random, so uniqueness is enforced by the database unique
constraint and create_numbered() retries with a fresh number on collision.
"""
import logging
import random

from django.db import IntegrityError, transaction

from .exceptions import ServiceError

logger = logging.getLogger(__name__)

SUFFIX_DIGITS = 4
SUFFIX_LIMIT = 10 ** SUFFIX_DIGITS
DEFAULT_ATTEMPTS = 5


class DuplicateNumber(ServiceError):
    """Raised when every generated number collided with an existing one."""
    kind = 'duplicate_number'
    status_code = 409

    def __init__(self, number, attempts, message=None):
        self.number = number
        self.attempts = attempts
        super().__init__(
            message or f"Could not allocate a unique number after {attempts} attempts (last tried {number})."
        )


def random_suffix():
    """Default suffix source: a uniformly random integer in [0, 9999]."""
    return random.randrange(SUFFIX_LIMIT)


def format_document_number(prefix, when, suffix):
    """Build a document number for ``when`` (a date or datetime)."""
    if not 0 <= suffix < SUFFIX_LIMIT:
        raise ValueError(f"Suffix {suffix} does not fit in {SUFFIX_DIGITS} digits")
    return f"{prefix}{when.year:04d}{when.month:02d}{suffix:0{SUFFIX_DIGITS}d}"


def create_numbered(model, number_field, prefix, create, *, when,
                    suffix_generator=random_suffix, attempts=DEFAULT_ATTEMPTS,
                    error_class=DuplicateNumber):
    """
    Create a record that needs a unique generated number.

    ``create(number)`` runs inside its own savepoint; a unique-key failure on
    ``number_field`` rolls back only that attempt and a new number is drawn.
    Any other IntegrityError propagates unchanged.

    Args:
        model: Model class owning the number column
        number_field: Name of the unique number column
        prefix: Number prefix ('PO', 'RC', 'IQ')
        create: Callable taking the number and returning the saved record
        when: Date/datetime whose year and month go into the number
        suffix_generator: Zero-arg callable returning an int in [0, 9999]
        attempts: Maximum numbers to try
        error_class: DuplicateNumber subclass raised when attempts run out

    Returns:
        Whatever ``create`` returned.
    """
    number = None
    for attempt in range(1, attempts + 1):
        number = format_document_number(prefix, when, suffix_generator())
        try:
            with transaction.atomic():
                return create(number)
        except IntegrityError:
            if not model.objects.filter(**{number_field: number}).exists():
                raise
            logger.warning(
                f"{model.__name__} number collision on {number} (attempt {attempt}/{attempts})"
            )
    raise error_class(number, attempts)
