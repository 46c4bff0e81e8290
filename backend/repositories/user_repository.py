"""
User repository for database operations.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class UserRepository(BaseRepository[db_models.User]):
    """Repository for User entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize user repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.User, db)

    def get_by_email(self, email: str) -> Optional[db_models.User]:
        """
        Get user by email.

        Args:
            email: User email

        Returns:
            User if found, None otherwise
        """
        return (
            self.db.query(db_models.User).filter(db_models.User.email == email).first()
        )

    def list_with_entry_counts(self) -> List[tuple[db_models.User, int]]:
        """
        Get every user together with the number of entries they own.

        Returns:
            List of (user, entry_count) tuples, newest users first
        """
        rows = (
            self.db.query(
                db_models.User,
                func.count(db_models.WikiEntry.id).label("entry_count"),
            )
            .outerjoin(
                db_models.WikiEntry, db_models.WikiEntry.user_id == db_models.User.id
            )
            .group_by(db_models.User.id)
            .order_by(db_models.User.created_at.desc())
            .all()
        )
        return [(user, int(count)) for user, count in rows]

    def set_ban(
        self,
        user: db_models.User,
        reason: str,
        banned_until: Optional[datetime],
    ) -> db_models.User:
        """
        Mark a user as banned.

        Args:
            user: User to ban
            reason: Reason shown to the user
            banned_until: End of a temporary ban, None for permanent

        Returns:
            Updated user
        """
        user.is_banned = True
        user.ban_reason = reason
        user.banned_until = banned_until
        return self.update(user)

    def clear_ban(self, user: db_models.User) -> db_models.User:
        """
        Reset all ban fields on a user.

        Args:
            user: User to unban

        Returns:
            Updated user
        """
        user.is_banned = False
        user.ban_reason = None
        user.banned_until = None
        return self.update(user)
