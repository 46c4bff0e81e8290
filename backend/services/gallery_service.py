"""
Gallery service for a user's personal image collection.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from helpers.sanitization import is_allowed_image_reference, sanitize_plain_text
from models.exceptions import (
    ImageNotFoundException,
    NotOwnerException,
    ValidationException,
)
from repositories.image_repository import ImageRepository


class GalleryService:
    """Service for gallery images."""

    @staticmethod
    def list_images(db: Session, user: db_models.User) -> List[db_models.UserImage]:
        """Get the user's images, newest first."""
        return ImageRepository(db).list_by_user(user.id)

    @staticmethod
    def add_image(
        db: Session,
        user: db_models.User,
        image_url: str,
        file_name: Optional[str] = None,
    ) -> db_models.UserImage:
        """
        Add an image reference to the user's gallery.

        Args:
            db: Database session
            user: Gallery owner
            image_url: URL or data URL of the image
            file_name: Optional original file name

        Returns:
            Created image

        Raises:
            ValidationException: If the reference is empty or not an image
        """
        if not image_url or not image_url.strip():
            raise ValidationException(
                "Image URL is required", field="image_url", value=image_url
            )
        if not is_allowed_image_reference(image_url):
            raise ValidationException(
                "Image must be an http(s) URL, an image data URL or a site path",
                field="image_url",
                value=image_url,
            )

        image = db_models.UserImage(
            user_id=user.id,
            image_url=image_url.strip(),
            file_name=sanitize_plain_text(file_name) if file_name else None,
        )
        return ImageRepository(db).create(image)

    @staticmethod
    def delete_image(db: Session, image_id: str, user: db_models.User) -> None:
        """
        Remove an image from the user's gallery.

        Raises:
            ImageNotFoundException: If the image does not exist
            NotOwnerException: If the image belongs to someone else
        """
        repo = ImageRepository(db)
        image = repo.get_by_id(image_id)
        if image is None:
            raise ImageNotFoundException(image_id)
        if image.user_id != user.id:
            raise NotOwnerException("You can only delete your own images")

        repo.delete(image)
        logger.debug(f"Gallery image {image_id} deleted by {user.id}")
