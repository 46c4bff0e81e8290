"""
Wiki entry repository for database operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class EntryRepository(BaseRepository[db_models.WikiEntry]):
    """Repository for WikiEntry database operations."""

    def __init__(self, db: Session):
        """
        Initialize entry repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.WikiEntry, db)

    def _with_author(self):
        return self.db.query(db_models.WikiEntry).options(
            joinedload(db_models.WikiEntry.author)
        )

    def list_public(self, skip: int = 0, limit: int = 100) -> List[db_models.WikiEntry]:
        """
        Get approved, non-special entries with their authors, newest first.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of entries
        """
        return (
            self._with_author()
            .filter(
                db_models.WikiEntry.status == db_models.EntryStatus.APPROVED,
                db_models.WikiEntry.is_special == False,  # noqa: E712
            )
            .order_by(db_models.WikiEntry.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def list_all_with_authors(
        self,
        status: Optional[db_models.EntryStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[db_models.WikiEntry]:
        """
        Get entries in every state with their authors (moderation listing).

        Args:
            status: Optional status filter
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of entries, newest first
        """
        query = self._with_author()
        if status is not None:
            query = query.filter(db_models.WikiEntry.status == status)
        return (
            query.order_by(db_models.WikiEntry.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def list_by_user(self, user_id: str) -> List[db_models.WikiEntry]:
        """Get all entries owned by a user, newest first."""
        return (
            self.db.query(db_models.WikiEntry)
            .filter(db_models.WikiEntry.user_id == user_id)
            .order_by(db_models.WikiEntry.created_at.desc())
            .all()
        )
