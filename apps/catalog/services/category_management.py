"""
Category management service.

Categories are referenced by products through a copy of their name, so
renames and deletes have to look at products by name.
"""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from apps.catalog.models import RewardCategory, RewardProduct
from apps.common.exceptions import store_errors

from .exceptions import (
    CategoryNotFoundError,
    CategoryInUseError,
    InvalidCatalogInputError,
)

logger = logging.getLogger(__name__)


def clean_name(value, label: str) -> str:
    """Strip a display name, rejecting empty or non-string values."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidCatalogInputError(f"{label} is required")
    return value.strip()


def _get_category(category_id, *, for_update=False) -> RewardCategory:
    queryset = RewardCategory.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(id=category_id)
    except (RewardCategory.DoesNotExist, DjangoValidationError, ValueError):
        raise CategoryNotFoundError(f"Category with ID {category_id} not found")


@store_errors('list categories')
def list_categories():
    """Return all categories ordered by name."""
    return list(RewardCategory.objects.order_by('name'))


@store_errors('get category')
def get_category_by_id(*, category_id: UUID) -> RewardCategory:
    """
    Get a category by ID.

    Raises:
        CategoryNotFoundError: If category doesn't exist
    """
    return _get_category(category_id)


@store_errors('create category')
def create_category(*, name: str) -> RewardCategory:
    """
    Create a category.

    Args:
        name: Display name; surrounding whitespace is stripped

    Raises:
        InvalidCatalogInputError: If name is empty
    """
    name = clean_name(name, 'Category name')
    category = RewardCategory.objects.create(name=name)
    logger.info("Created category %s (%s)", category.id, name)
    return category


@store_errors('rename category')
@transaction.atomic
def rename_category(
    *,
    category_id: UUID,
    name: str,
    cascade_to_products: bool = False
) -> RewardCategory:
    """
    Rename a category.

    Products keep the name they were saved with unless cascade_to_products
    is set, in which case every product carrying the old name is moved to
    the new one in the same transaction.

    Raises:
        InvalidCatalogInputError: If name is empty
        CategoryNotFoundError: If category doesn't exist
    """
    name = clean_name(name, 'Category name')
    category = _get_category(category_id, for_update=True)

    old_name = category.name
    category.name = name
    category.save(update_fields=['name', 'updated_at'])

    moved = 0
    if cascade_to_products and old_name != name:
        moved = RewardProduct.objects.filter(category_name=old_name).update(category_name=name)

    logger.info(
        "Renamed category %s from %r to %r (%d product(s) moved)",
        category.id, old_name, name, moved,
    )
    return category


@store_errors('delete category')
@transaction.atomic
def delete_category(*, category_id: UUID) -> None:
    """
    Delete a category that no product references.

    Raises:
        CategoryNotFoundError: If category doesn't exist
        CategoryInUseError: If any product carries the category's name
    """
    category = _get_category(category_id, for_update=True)

    product_count = RewardProduct.objects.filter(category_name=category.name).count()
    if product_count:
        raise CategoryInUseError(
            f"Category '{category.name}' is used by {product_count} product(s)",
            product_count=product_count,
        )

    category.delete()
    logger.info("Deleted category %s (%s)", category_id, category.name)


def find_category_for_product(product: RewardProduct) -> Optional[RewardCategory]:
    """
    Category whose current name matches the product's snapshot.

    Returns None when that category was renamed or deleted since the
    product was last saved.
    """
    return (
        RewardCategory.objects
        .filter(name=product.category_name)
        .order_by('created_at')
        .first()
    )


def category_ids_by_name() -> dict:
    """Map category name to the id of the oldest category with that name."""
    mapping = {}
    for category_id, name in RewardCategory.objects.order_by('-created_at').values_list('id', 'name'):
        mapping[name] = category_id
    return mapping
