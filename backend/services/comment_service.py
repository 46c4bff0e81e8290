"""
Comment service for business logic.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from helpers.sanitization import sanitize_plain_text
from models.exceptions import (
    CommentNotFoundException,
    NotOwnerException,
    ValidationException,
)
from repositories.comment_repository import CommentRepository
from services.access_policy_service import AccessPolicyService, Capability
from services.entry_service import EntryService


class CommentService:
    """Service for comment-related business logic."""

    @staticmethod
    def get_comments_for_entry(
        db: Session,
        entry_id: str,
        viewer: Optional[db_models.User] = None,
        token: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[db_models.Comment]:
        """
        Get comments on an entry with their authors, newest first.

        Comments are only readable by someone who may read the entry itself.

        Args:
            db: Database session
            entry_id: Entry ID
            viewer: Authenticated user or None
            token: Special access token from the request
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of comments

        Raises:
            EntryNotFoundException: If the entry does not exist
            AccessDeniedException: If the entry may not be read
        """
        EntryService.get_entry_for_viewer(db, entry_id, viewer, token)
        return CommentRepository(db).list_by_entry(entry_id, skip=skip, limit=limit)

    @staticmethod
    def create_comment(
        db: Session,
        entry_id: str,
        content: str,
        user: db_models.User,
        token: Optional[str] = None,
    ) -> db_models.Comment:
        """
        Add a comment to an entry.

        Args:
            db: Database session
            entry_id: Entry ID
            content: Comment text (HTML is stripped)
            user: Comment author
            token: Special access token, needed for special entries of others

        Returns:
            Created comment

        Raises:
            EntryNotFoundException: If the entry does not exist
            AccessDeniedException: If the user may not read the entry
            ValidationException: If the content is empty after sanitizing
        """
        EntryService.get_entry_for_viewer(db, entry_id, user, token)

        clean = (sanitize_plain_text(content) or "").strip()
        if not clean:
            raise ValidationException(
                "Comment cannot be empty", field="content", value=content
            )

        comment = db_models.Comment(entry_id=entry_id, user_id=user.id, content=clean)
        return CommentRepository(db).create(comment)

    @staticmethod
    def delete_comment(db: Session, comment_id: str, user: db_models.User) -> None:
        """
        Delete a comment. Allowed for its author and for moderators.

        Raises:
            CommentNotFoundException: If the comment does not exist
            NotOwnerException: If the user may not delete it
        """
        repo = CommentRepository(db)
        comment = repo.get_by_id(comment_id)
        if comment is None:
            raise CommentNotFoundException(comment_id)

        is_author = comment.user_id == user.id
        if not is_author and not AccessPolicyService.has_capability(
            user, Capability.MODERATE
        ):
            raise NotOwnerException("You can only delete your own comments")

        repo.delete(comment)
        if not is_author:
            logger.info(f"Comment {comment_id} removed by moderator {user.id}")
