"""
Error taxonomy shared by the catalog and purchases services.

Every service error derives from one of five kinds. Callers decide what to do
by kind, not by concrete class:

- ValidationError: caller input violates a precondition. Raised before any
  store call is made.
- NotFoundError: a referenced entity does not exist. Nothing was mutated.
- ConflictError: the operation would break an invariant. Nothing was mutated.
- PartialFailureError: the primary mutation was applied but a dependent step
  failed. The applied change is never rolled back automatically.
- TransportError: the database or the storage backend failed. The outcome is
  unknown; re-read state before retrying a write.
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError

logger = logging.getLogger(__name__)


class RewardsServiceError(Exception):
    """Base exception for all rewards service errors."""

    code = 'rewards_error'


class ValidationError(RewardsServiceError):
    """Caller-supplied input violates a precondition."""

    code = 'validation_error'


class NotFoundError(RewardsServiceError):
    """Referenced entity does not exist at the time of the operation."""

    code = 'not_found'


class ConflictError(RewardsServiceError):
    """Operation would violate an invariant."""

    code = 'conflict'


class PartialFailureError(RewardsServiceError):
    """
    A multi-step operation applied its primary mutation but a later step failed.

    Attributes:
        completed_steps: Names of the steps that were applied.
        failed_step: Name of the step that failed.
        entity_id: Identifier of the entity whose state already changed.
    """

    code = 'partial_failure'

    def __init__(self, message, *, completed_steps, failed_step, entity_id=None):
        super().__init__(message)
        self.completed_steps = list(completed_steps)
        self.failed_step = failed_step
        self.entity_id = entity_id


class TransportError(RewardsServiceError):
    """Underlying store or storage failure; no mutation guaranteed either way."""

    code = 'transport_error'


@contextmanager
def store_errors(operation):
    """
    Translate database failures raised inside the block into TransportError.

    Usable as a context manager or as a decorator:

        @store_errors('delete category')
        def delete_category(...):
            ...
    """
    try:
        yield
    except DatabaseError as e:
        logger.error("Store failure during %s: %s", operation, e)
        raise TransportError(f"Store unavailable during {operation}") from e
