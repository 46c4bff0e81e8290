"""
Like Service

One like per user per entry. Uniqueness is left to the database constraint
so two concurrent requests cannot both succeed.
"""

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import DuplicateLikeException
from repositories.like_repository import LikeRepository
from services.entry_service import EntryService


class LikeService:
    """Service for entry likes."""

    @staticmethod
    def like_entry(
        db: Session,
        entry_id: str,
        user: db_models.User,
        token: Optional[str] = None,
    ) -> db_models.Like:
        """
        Like an entry.

        Args:
            db: Database session
            entry_id: Entry ID
            user: User liking the entry
            token: Special access token, needed for special entries of others

        Returns:
            Created like

        Raises:
            EntryNotFoundException: If the entry does not exist
            AccessDeniedException: If the user may not read the entry
            DuplicateLikeException: If the user already liked the entry
        """
        EntryService.get_entry_for_viewer(db, entry_id, user, token)

        repo = LikeRepository(db)
        try:
            return repo.create(db_models.Like(entry_id=entry_id, user_id=user.id))
        except IntegrityError:
            repo.rollback()
            raise DuplicateLikeException()

    @staticmethod
    def unlike_entry(db: Session, entry_id: str, user: db_models.User) -> bool:
        """
        Remove the user's like. Removing a like that does not exist is a no-op.

        Returns:
            True if a like was removed
        """
        return LikeRepository(db).delete_by_entry_and_user(entry_id, user.id)

    @staticmethod
    def list_likes(
        db: Session,
        entry_id: str,
        viewer: Optional[db_models.User] = None,
        token: Optional[str] = None,
    ) -> List[db_models.Like]:
        """
        Get likes on an entry, newest first.

        Raises:
            EntryNotFoundException: If the entry does not exist
            AccessDeniedException: If the entry may not be read
        """
        EntryService.get_entry_for_viewer(db, entry_id, viewer, token)
        return LikeRepository(db).list_by_entry(entry_id)

    @staticmethod
    def get_like_summary(
        db: Session,
        entry_id: str,
        user: Optional[db_models.User] = None,
        token: Optional[str] = None,
    ) -> schemas.LikeSummary:
        """
        Like count for an entry and whether the given user liked it.

        Raises:
            EntryNotFoundException: If the entry does not exist
            AccessDeniedException: If the entry may not be read
        """
        EntryService.get_entry_for_viewer(db, entry_id, user, token)

        repo = LikeRepository(db)
        liked = (
            user is not None
            and repo.get_by_entry_and_user(entry_id, user.id) is not None
        )
        return schemas.LikeSummary(
            entry_id=entry_id,
            count=repo.count_by_entry(entry_id),
            liked_by_me=liked,
        )
