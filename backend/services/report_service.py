"""
Report Service

Users flag entries; moderators triage the reports.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.sanitization import sanitize_plain_text
from models.exceptions import (
    InsufficientPermissionsException,
    InvalidChoiceException,
    ReportNotFoundException,
)
from repositories.report_repository import ReportRepository
from services.access_policy_service import AccessPolicyService, Capability
from services.entry_service import EntryService


def _require_moderator(requester: db_models.User) -> None:
    if not AccessPolicyService.has_capability(requester, Capability.MODERATE):
        raise InsufficientPermissionsException("Moderator access required")


class ReportService:
    """Service for content reports."""

    @staticmethod
    def create_report(
        db: Session, payload: schemas.ReportCreate, reporter: db_models.User
    ) -> db_models.ContentReport:
        """
        File a report against an entry.

        Args:
            db: Database session
            payload: Entry ID, reason and optional description
            reporter: User filing the report

        Returns:
            Created report (status pending)

        Raises:
            EntryNotFoundException: If the entry does not exist
            AccessDeniedException: If the reporter may not read the entry
        """
        entry = EntryService.get_entry_for_viewer(
            db, payload.entry_id, reporter, payload.token
        )

        report = db_models.ContentReport(
            entry_id=entry.id,
            reporter_id=reporter.id,
            reason=payload.reason,
            description=sanitize_plain_text(payload.description),
            status=db_models.ReportStatus.PENDING,
        )
        report = ReportRepository(db).create(report)
        logger.info(
            f"Report {report.id} filed on entry {entry.id} by {reporter.id} "
            f"(reason={payload.reason.value})"
        )
        return report

    @staticmethod
    def list_reports(
        db: Session,
        requester: db_models.User,
        status: Optional[db_models.ReportStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[db_models.ContentReport]:
        """
        Admin listing of reports with entry, entry author and reporter.

        Raises:
            InsufficientPermissionsException: If requester cannot moderate
        """
        _require_moderator(requester)
        return ReportRepository(db).list_with_details(
            status=status, skip=skip, limit=limit
        )

    @staticmethod
    def list_reports_for_entry(
        db: Session, entry_id: str, requester: db_models.User
    ) -> List[db_models.ContentReport]:
        """Reports filed against one entry, newest first."""
        _require_moderator(requester)
        return ReportRepository(db).list_by_entry(entry_id)

    @staticmethod
    def update_status(
        db: Session,
        report_id: str,
        status: db_models.ReportStatus | str,
        requester: db_models.User,
    ) -> db_models.ContentReport:
        """
        Move a report through triage.

        Raises:
            InsufficientPermissionsException: If requester cannot moderate
            InvalidChoiceException: If status is not a report status
            ReportNotFoundException: If the report does not exist
        """
        _require_moderator(requester)
        try:
            new_status = db_models.ReportStatus(status)
        except ValueError:
            raise InvalidChoiceException(
                "status", status, [s.value for s in db_models.ReportStatus]
            )

        repo = ReportRepository(db)
        report = repo.get_by_id(report_id)
        if report is None:
            raise ReportNotFoundException(report_id)

        report.status = new_status
        report = repo.update(report)
        logger.info(
            f"Report {report.id} marked {new_status.value} by {requester.id}"
        )
        return report

    @staticmethod
    def delete_report(db: Session, report_id: str, requester: db_models.User) -> None:
        """
        Delete a report.

        Raises:
            InsufficientPermissionsException: If requester cannot moderate
            ReportNotFoundException: If the report does not exist
        """
        _require_moderator(requester)
        repo = ReportRepository(db)
        report = repo.get_by_id(report_id)
        if report is None:
            raise ReportNotFoundException(report_id)
        repo.delete(report)
