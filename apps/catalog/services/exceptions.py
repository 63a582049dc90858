"""
Domain-specific exceptions for catalog app.

Each one is a kind from the shared rewards taxonomy, so the API error
handler maps it to an HTTP response without the views catching anything.
"""

from apps.common.exceptions import (
    RewardsServiceError,
    ValidationError,
    NotFoundError,
    ConflictError,
    TransportError,
)


class CatalogServiceError(RewardsServiceError):
    """Base exception for all catalog service errors."""
    pass


class InvalidCatalogInputError(CatalogServiceError, ValidationError):
    """Raised when a name, price or category reference is unusable."""
    pass


class ImageTooLargeError(InvalidCatalogInputError):
    """Raised when an uploaded image exceeds REWARDS_MAX_IMAGE_SIZE."""
    pass


class CategoryNotFoundError(CatalogServiceError, NotFoundError):
    """Raised when a category does not exist."""
    pass


class ProductNotFoundError(CatalogServiceError, NotFoundError):
    """Raised when a product does not exist."""
    pass


class CategoryInUseError(CatalogServiceError, ConflictError):
    """Raised when deleting a category that products still reference by name."""

    code = 'category_in_use'

    def __init__(self, message, *, product_count):
        super().__init__(message)
        self.product_count = product_count


class ImageStorageError(CatalogServiceError, TransportError):
    """Raised when the storage backend fails to save or delete an image."""
    pass
