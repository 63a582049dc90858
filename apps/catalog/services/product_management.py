"""
Product management service.

Handles product CRUD together with the product's image object. Every lookup
and validation happens before the first storage or database write.
"""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError

from apps.catalog.models import RewardCategory, RewardProduct
from apps.common.exceptions import store_errors

from .category_management import clean_name, get_category_by_id
from .exceptions import (
    CategoryNotFoundError,
    ProductNotFoundError,
    InvalidCatalogInputError,
    ImageStorageError,
)
from .image_storage import (
    validate_reward_image,
    upload_reward_image,
    delete_reward_image,
)

logger = logging.getLogger(__name__)


def _validate_product_input(name, category_id, price, image=None, *, category_required=True) -> str:
    name = clean_name(name, 'Product name')
    if category_required and category_id in (None, ''):
        raise InvalidCatalogInputError("Category is required")
    if isinstance(price, bool) or not isinstance(price, int):
        raise InvalidCatalogInputError("Price must be a whole number of points")
    if price < 0:
        raise InvalidCatalogInputError("Price cannot be negative")
    if image is not None:
        validate_reward_image(image)
    return name


def _discard_uploaded_image(object_name: str) -> None:
    """Remove an image whose product record was never written."""
    try:
        delete_reward_image(object_name)
    except ImageStorageError:
        logger.exception("Orphaned reward image %s left in storage", object_name)


@store_errors('list products')
def list_products(*, category_name: Optional[str] = None):
    """Return products, newest first, optionally limited to one category name."""
    queryset = RewardProduct.objects.order_by('-created_at')
    if category_name:
        queryset = queryset.filter(category_name=category_name)
    return list(queryset)


@store_errors('get product')
def get_product_by_id(*, product_id: UUID) -> RewardProduct:
    """
    Get a product by ID.

    Raises:
        ProductNotFoundError: If product doesn't exist
    """
    try:
        return RewardProduct.objects.get(id=product_id)
    except (RewardProduct.DoesNotExist, DjangoValidationError, ValueError):
        raise ProductNotFoundError(f"Product with ID {product_id} not found")


@store_errors('create product')
def create_product(
    *,
    name: str,
    category_id: UUID,
    price: int,
    image=None
) -> RewardProduct:
    """
    Create a product, uploading its image first when one is given.

    The product stores the category's current name, not its id.

    Args:
        name: Display name; surrounding whitespace is stripped
        category_id: Category the product belongs to
        price: Price in reward points (>= 0)
        image: Optional Django File / UploadedFile

    Raises:
        InvalidCatalogInputError: If input is invalid or the category doesn't exist
        ImageTooLargeError: If the image is over the size limit
        ImageStorageError: If the image upload fails
    """
    name = _validate_product_input(name, category_id, price, image)
    try:
        category = get_category_by_id(category_id=category_id)
    except CategoryNotFoundError as e:
        raise InvalidCatalogInputError(str(e)) from e

    image_name = upload_reward_image(image) if image is not None else ''

    try:
        product = RewardProduct.objects.create(
            name=name,
            category_name=category.name,
            price=price,
            image=image_name,
        )
    except DatabaseError:
        _discard_uploaded_image(image_name)
        raise

    logger.info("Created product %s (%s) in %r", product.id, name, category.name)
    return product


@store_errors('update product')
def update_product(
    *,
    product_id: UUID,
    name: str,
    price: int,
    category_id: Optional[UUID] = None,
    image=None
) -> RewardProduct:
    """
    Update a product.

    Without a category_id the product keeps its category name snapshot,
    even when that category has since been renamed or deleted.

    With a new image the old object is deleted before the new one is
    uploaded, so a product never owns more than one stored image. If the
    upload fails the product is left without an image.

    Raises:
        InvalidCatalogInputError: If input is invalid
        ImageTooLargeError: If the image is over the size limit
        ProductNotFoundError: If product doesn't exist
        CategoryNotFoundError: If category doesn't exist
        ImageStorageError: If deleting the old or uploading the new image fails
    """
    name = _validate_product_input(name, category_id, price, image, category_required=False)
    product = get_product_by_id(product_id=product_id)

    update_fields = ['name', 'price', 'updated_at']
    if category_id not in (None, ''):
        product.category_name = get_category_by_id(category_id=category_id).name
        update_fields.append('category_name')

    new_image = ''
    if image is not None:
        delete_reward_image(product.image)
        try:
            new_image = upload_reward_image(image)
        except ImageStorageError:
            if product.image:
                RewardProduct.objects.filter(id=product.id).update(image='')
            raise
        product.image = new_image
        update_fields.append('image')

    product.name = name
    product.price = price

    try:
        product.save(update_fields=update_fields)
    except DatabaseError:
        _discard_uploaded_image(new_image)
        raise

    logger.info("Updated product %s", product.id)
    return product


@store_errors('delete product')
def delete_product(*, product_id: UUID) -> None:
    """
    Delete a product and its image.

    The image goes first; a missing image object is not an error.

    Raises:
        ProductNotFoundError: If product doesn't exist
        ImageStorageError: If the image delete fails (the record is kept)
    """
    product = get_product_by_id(product_id=product_id)
    delete_reward_image(product.image)
    product.delete()
    logger.info("Deleted product %s (%s)", product_id, product.name)


@store_errors('count catalog')
def get_catalog_counts() -> dict:
    """Number of categories and products."""
    return {
        'categories': RewardCategory.objects.count(),
        'products': RewardProduct.objects.count(),
    }
