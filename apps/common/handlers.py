"""DRF exception handler that renders the rewards error taxonomy."""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import (
    RewardsServiceError,
    ValidationError,
    NotFoundError,
    ConflictError,
    PartialFailureError,
    TransportError,
)

logger = logging.getLogger(__name__)


# Partial failures are 207: the primary change was applied.
STATUS_BY_ERROR = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PartialFailureError, status.HTTP_207_MULTI_STATUS),
    (TransportError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for_error(exc):
    """Return the HTTP status code for a rewards service error."""
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def error_payload(exc):
    """
    Response body for a rewards service error.

    ``{'error': message, 'code': code}``, plus ``completed_steps``,
    ``failed_step`` and ``id`` for partial failures.
    """
    data = {
        'error': str(exc),
        'code': exc.code,
    }

    if isinstance(exc, PartialFailureError):
        data['completed_steps'] = exc.completed_steps
        data['failed_step'] = exc.failed_step
        if exc.entity_id is not None:
            data['id'] = str(exc.entity_id)

    return data


def rewards_exception_handler(exc, context):
    """
    Render RewardsServiceError subclasses with error_payload().

    Everything else falls through to the default DRF handler.
    """
    if not isinstance(exc, RewardsServiceError):
        return exception_handler(exc, context)

    if isinstance(exc, PartialFailureError):
        logger.warning("Partial failure returned to caller: %s", exc)
    elif isinstance(exc, TransportError):
        logger.error("Store failure returned to caller: %s", exc)

    return Response(error_payload(exc), status=status_for_error(exc))
