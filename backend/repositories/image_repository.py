"""Repository for gallery image operations."""

from typing import List

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from repositories.base import BaseRepository


class ImageRepository(BaseRepository[db_models.UserImage]):
    """Repository for UserImage CRUD operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.UserImage, db)

    def list_by_user(self, user_id: str) -> List[db_models.UserImage]:
        """
        Get a user's gallery, newest first.

        Args:
            user_id: Owner ID

        Returns:
            List of images
        """
        return (
            self.db.query(db_models.UserImage)
            .filter(db_models.UserImage.user_id == user_id)
            .order_by(db_models.UserImage.created_at.desc())
            .all()
        )
