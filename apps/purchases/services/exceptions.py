"""
Domain-specific exceptions for purchases app.

Each one is a kind from the shared rewards taxonomy, so the API error
handler maps it to an HTTP response without the views catching anything.
"""

from apps.common.exceptions import (
    RewardsServiceError,
    ValidationError,
    NotFoundError,
    ConflictError,
    PartialFailureError,
)


class PurchaseServiceError(RewardsServiceError):
    """Base exception for all purchase service errors."""
    pass


class InvalidPurchaseInputError(PurchaseServiceError, ValidationError):
    """Raised when a status value or filter is not recognised."""
    pass


class InvalidRefundAmountError(PurchaseServiceError, ValidationError):
    """Raised when a balance credit is negative or not a whole number."""
    pass


class PurchaseNotFoundError(PurchaseServiceError, NotFoundError):
    """Raised when a purchase does not exist."""
    pass


class PurchaseAlreadyResolvedError(PurchaseServiceError, ConflictError):
    """Raised when approving or rejecting a purchase that is no longer pending."""

    code = 'purchase_already_resolved'


class UserAccountNotFoundError(PurchaseServiceError, NotFoundError):
    """Raised when no account matches the purchaser's user_id or username."""

    code = 'user_account_not_found'


class RefundNotSettledError(PurchaseServiceError, PartialFailureError):
    """Raised when a purchase was rejected but its refund could not be credited."""
    pass
