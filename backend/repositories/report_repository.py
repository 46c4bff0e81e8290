"""
Repository for content report operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from repositories.base import BaseRepository


class ReportRepository(BaseRepository[db_models.ContentReport]):
    """Repository for ContentReport database operations."""

    def __init__(self, db: Session):
        """
        Initialize report repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.ContentReport, db)

    def list_with_details(
        self,
        status: Optional[db_models.ReportStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[db_models.ContentReport]:
        """
        Get reports with the reported entry, its author and the reporter.

        Args:
            status: Optional status filter
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of reports, newest first
        """
        query = self.db.query(db_models.ContentReport).options(
            joinedload(db_models.ContentReport.entry).joinedload(
                db_models.WikiEntry.author
            ),
            joinedload(db_models.ContentReport.reporter),
        )
        if status is not None:
            query = query.filter(db_models.ContentReport.status == status)
        return (
            query.order_by(db_models.ContentReport.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def list_by_entry(self, entry_id: str) -> List[db_models.ContentReport]:
        """Get all reports filed against one entry, newest first."""
        return (
            self.db.query(db_models.ContentReport)
            .filter(db_models.ContentReport.entry_id == entry_id)
            .order_by(db_models.ContentReport.created_at.desc())
            .all()
        )
