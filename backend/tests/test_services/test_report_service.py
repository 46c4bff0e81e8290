"""
Unit tests for ReportService.
"""

import pytest
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    AccessDeniedException,
    EntryNotFoundException,
    InsufficientPermissionsException,
    InvalidChoiceException,
    ReportNotFoundException,
)
from services.report_service import ReportService


def _report(db_session, entry, reporter, reason=db_models.ReportReason.SPAM):
    return ReportService.create_report(
        db_session,
        schemas.ReportCreate(entry_id=entry.id, reason=reason, description="Bad"),
        reporter,
    )


class TestCreateReport:
    def test_report_starts_pending(self, db_session: Session, other_user, approved_entry):
        report = _report(db_session, approved_entry, other_user)

        assert report.status == db_models.ReportStatus.PENDING
        assert report.reporter_id == other_user.id
        assert report.entry_id == approved_entry.id

    def test_missing_entry(self, db_session: Session, other_user):
        with pytest.raises(EntryNotFoundException):
            ReportService.create_report(
                db_session,
                schemas.ReportCreate(
                    entry_id="missing", reason=db_models.ReportReason.OTHER
                ),
                other_user,
            )

    def test_hidden_entry_cannot_be_reported_by_stranger(
        self, db_session: Session, other_user, pending_entry, special_entry
    ):
        for entry in (pending_entry, special_entry):
            with pytest.raises(AccessDeniedException):
                _report(db_session, entry, other_user)

    def test_share_link_holder_can_report(
        self, db_session: Session, other_user, special_entry
    ):
        report = ReportService.create_report(
            db_session,
            schemas.ReportCreate(
                entry_id=special_entry.id,
                reason=db_models.ReportReason.OTHER,
                token="a" * 64,
            ),
            other_user,
        )
        assert report.entry_id == special_entry.id


class TestTriage:
    def test_list_with_status_filter(
        self, db_session: Session, moderator_user, other_user, approved_entry
    ):
        first = _report(db_session, approved_entry, other_user)
        second = _report(
            db_session, approved_entry, other_user, db_models.ReportReason.HARASSMENT
        )
        ReportService.update_status(
            db_session, second.id, db_models.ReportStatus.RESOLVED, moderator_user
        )

        pending = ReportService.list_reports(
            db_session, moderator_user, status=db_models.ReportStatus.PENDING
        )
        everything = ReportService.list_reports(db_session, moderator_user)

        assert [r.id for r in pending] == [first.id]
        assert len(everything) == 2
        assert everything[0].entry.author.id == approved_entry.user_id
        assert everything[0].reporter.id == other_user.id

    def test_reports_for_entry(
        self, db_session: Session, moderator_user, other_user, approved_entry
    ):
        _report(db_session, approved_entry, other_user)
        reports = ReportService.list_reports_for_entry(
            db_session, approved_entry.id, moderator_user
        )
        assert len(reports) == 1

    def test_invalid_status(
        self, db_session: Session, moderator_user, other_user, approved_entry
    ):
        report = _report(db_session, approved_entry, other_user)
        with pytest.raises(InvalidChoiceException):
            ReportService.update_status(db_session, report.id, "closed", moderator_user)

    def test_regular_user_cannot_triage(self, db_session: Session, test_user):
        with pytest.raises(InsufficientPermissionsException):
            ReportService.list_reports(db_session, test_user)

    def test_delete(self, db_session: Session, moderator_user, other_user, approved_entry):
        report = _report(db_session, approved_entry, other_user)
        report_id = report.id

        ReportService.delete_report(db_session, report_id, moderator_user)

        assert db_session.get(db_models.ContentReport, report_id) is None

    def test_delete_missing(self, db_session: Session, moderator_user):
        with pytest.raises(ReportNotFoundException):
            ReportService.delete_report(db_session, "missing", moderator_user)
