"""
Catalog app services layer.

Services own the catalog rules: names are stripped and required, prices are
whole non-negative points, categories in use cannot be deleted, and product
images are kept in step with their records.
"""

from .exceptions import (
    CatalogServiceError,
    InvalidCatalogInputError,
    ImageTooLargeError,
    CategoryNotFoundError,
    ProductNotFoundError,
    CategoryInUseError,
    ImageStorageError,
)

from .category_management import (
    list_categories,
    get_category_by_id,
    create_category,
    rename_category,
    delete_category,
    find_category_for_product,
    category_ids_by_name,
)

from .product_management import (
    list_products,
    get_product_by_id,
    create_product,
    update_product,
    delete_product,
    get_catalog_counts,
)

from .image_storage import (
    validate_reward_image,
    upload_reward_image,
    delete_reward_image,
    reward_image_url,
)


__all__ = [
    # Exceptions
    'CatalogServiceError',
    'InvalidCatalogInputError',
    'ImageTooLargeError',
    'CategoryNotFoundError',
    'ProductNotFoundError',
    'CategoryInUseError',
    'ImageStorageError',

    # Categories
    'list_categories',
    'get_category_by_id',
    'create_category',
    'rename_category',
    'delete_category',
    'find_category_for_product',
    'category_ids_by_name',

    # Products
    'list_products',
    'get_product_by_id',
    'create_product',
    'update_product',
    'delete_product',
    'get_catalog_counts',

    # Images
    'validate_reward_image',
    'upload_reward_image',
    'delete_reward_image',
    'reward_image_url',
]
