"""
Reward image storage.

Images are stored through Django's default storage backend. The database
only keeps the object name returned by the backend.
"""

import logging
import os
import posixpath
import uuid

from django.conf import settings
from django.core.files.storage import default_storage

from .exceptions import ImageTooLargeError, ImageStorageError

logger = logging.getLogger(__name__)


def validate_reward_image(image) -> None:
    """
    Check an image against REWARDS_MAX_IMAGE_SIZE without touching storage.

    Raises:
        ImageTooLargeError: If the image exceeds the limit
    """
    size = getattr(image, 'size', None)
    if size is not None and size > settings.REWARDS_MAX_IMAGE_SIZE:
        raise ImageTooLargeError(
            f"Image is {size} bytes; the limit is {settings.REWARDS_MAX_IMAGE_SIZE}"
        )


def upload_reward_image(image) -> str:
    """
    Store an uploaded image under a random name.

    Args:
        image: Django File / UploadedFile

    Returns:
        Object name to keep on the product

    Raises:
        ImageTooLargeError: If the image exceeds REWARDS_MAX_IMAGE_SIZE
        ImageStorageError: If the storage backend fails
    """
    validate_reward_image(image)

    extension = os.path.splitext(getattr(image, 'name', '') or '')[1].lower()
    name = posixpath.join(settings.REWARDS_IMAGE_UPLOAD_DIR, f"{uuid.uuid4().hex}{extension}")

    try:
        object_name = default_storage.save(name, image)
    except OSError as e:
        logger.error("Image upload failed for %s: %s", name, e)
        raise ImageStorageError("Could not store image") from e

    logger.info("Stored reward image %s", object_name)
    return object_name


def delete_reward_image(object_name: str) -> None:
    """
    Delete a stored image. Empty names and missing objects are ignored.

    Raises:
        ImageStorageError: If the storage backend fails
    """
    if not object_name:
        return

    try:
        if not default_storage.exists(object_name):
            logger.info("Reward image %s already gone", object_name)
            return
        default_storage.delete(object_name)
    except OSError as e:
        logger.error("Image delete failed for %s: %s", object_name, e)
        raise ImageStorageError("Could not delete image") from e

    logger.info("Deleted reward image %s", object_name)


def reward_image_url(object_name: str):
    """Public URL of a stored image, or None when there is no image."""
    if not object_name:
        return None
    return default_storage.url(object_name)
