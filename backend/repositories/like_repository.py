"""Repository for entry like operations."""

from typing import List

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from repositories.base import BaseRepository


class LikeRepository(BaseRepository[db_models.Like]):
    """Repository for Like CRUD operations."""

    def __init__(self, db: Session):
        """
        Initialize like repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.Like, db)

    def get_by_entry_and_user(
        self, entry_id: str, user_id: str
    ) -> db_models.Like | None:
        """
        Get a like by entry and user IDs.

        Args:
            entry_id: Entry ID
            user_id: User ID

        Returns:
            Like if found, None otherwise
        """
        return (
            self.db.query(db_models.Like)
            .filter(
                db_models.Like.entry_id == entry_id,
                db_models.Like.user_id == user_id,
            )
            .first()
        )

    def list_by_entry(self, entry_id: str) -> List[db_models.Like]:
        """Get likes on an entry, newest first."""
        return (
            self.db.query(db_models.Like)
            .filter(db_models.Like.entry_id == entry_id)
            .order_by(db_models.Like.created_at.desc())
            .all()
        )

    def count_by_entry(self, entry_id: str) -> int:
        """
        Count likes for an entry.

        Args:
            entry_id: Entry ID

        Returns:
            Number of likes on the entry
        """
        return (
            self.db.query(db_models.Like)
            .filter(db_models.Like.entry_id == entry_id)
            .count()
        )

    def delete_by_entry_and_user(self, entry_id: str, user_id: str) -> bool:
        """
        Delete a like by entry and user.

        Args:
            entry_id: Entry ID
            user_id: User ID

        Returns:
            True if deleted, False if not found
        """
        like = self.get_by_entry_and_user(entry_id, user_id)
        if not like:
            return False

        self.db.delete(like)
        self.db.commit()
        return True
