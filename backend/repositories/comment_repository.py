"""
Comment repository for database operations.
"""

from typing import List

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class CommentRepository(BaseRepository[db_models.Comment]):
    """Repository for Comment entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize comment repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.Comment, db)

    def list_by_entry(
        self, entry_id: str, skip: int = 0, limit: int = 100
    ) -> List[db_models.Comment]:
        """
        Get comments on an entry with their authors, newest first.

        Args:
            entry_id: Entry ID
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of comments
        """
        return (
            self.db.query(db_models.Comment)
            .options(joinedload(db_models.Comment.user))
            .filter(db_models.Comment.entry_id == entry_id)
            .order_by(db_models.Comment.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
