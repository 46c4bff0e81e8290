from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PaginationLimitLarge, PaginationSkip
from repositories.database import get_db
from services import EntryService, ReportService, UserService

router = APIRouter(prefix="/admin", tags=["admin"])


# Entries


@router.get("/entries", response_model=List[schemas.EntryWithAuthor])
def get_all_entries(
    status_filter: Optional[db_models.EntryStatus] = Query(
        default=None, alias="status", description="Only entries in this state"
    ),
    skip: PaginationSkip = 0,
    limit: PaginationLimitLarge = 100,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_moderator_user),
) -> List[db_models.WikiEntry]:
    """
    Moderation queue: entries in every state with their authors.

    Domain exceptions are caught by centralized exception handlers.
    """
    return EntryService.list_all_entries(
        db, current_user, status=status_filter, skip=skip, limit=limit
    )


@router.patch("/entries/{entry_id}/moderate", response_model=schemas.Entry)
def moderate_entry(
    entry_id: str,
    moderation: schemas.EntryModerate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_moderator_user),
) -> db_models.WikiEntry:
    """Approve or reject an entry."""
    return EntryService.moderate_entry(db, entry_id, moderation.status, current_user)


@router.patch("/entries/{entry_id}/verify", response_model=schemas.Entry)
def verify_entry(
    entry_id: str,
    payload: schemas.EntryVerify,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> db_models.WikiEntry:
    """Set the fact-check verdict of an entry."""
    return EntryService.set_verification(
        db, entry_id, payload.verification, current_user
    )


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> None:
    """Delete any entry with its comments, likes and reports."""
    EntryService.delete_entry(db, entry_id, current_user)


# Users


@router.get("/users", response_model=List[schemas.UserWithEntryCount])
def get_all_users(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> List[schemas.UserWithEntryCount]:
    """Every user with ban state and entry count."""
    return UserService.list_users_with_counts(db)


@router.patch("/users/{user_id}/role", response_model=schemas.User)
def update_user_role(
    user_id: str,
    payload: schemas.RoleUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> db_models.User:
    """Change a user's role. Admins cannot demote themselves."""
    return UserService.set_role(db, user_id, payload.role, current_user)


@router.patch("/users/{user_id}/badge", response_model=schemas.User)
def update_user_badge(
    user_id: str,
    payload: schemas.BadgeUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> db_models.User:
    """Assign a cosmetic badge."""
    return UserService.set_badge(db, user_id, payload.badge, current_user)


@router.post("/users/{user_id}/ban", response_model=schemas.User)
def ban_user(
    user_id: str,
    ban: schemas.BanRequest,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> db_models.User:
    """
    Ban a user.

    A positive `hours` gives a temporary ban; otherwise the ban is permanent.
    """
    return UserService.ban_user(db, user_id, ban.reason, ban.hours, current_user)


@router.post("/users/{user_id}/unban", response_model=schemas.User)
def unban_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> db_models.User:
    """Lift a ban."""
    return UserService.unban_user(db, user_id, current_user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> None:
    """Delete a user and everything they own."""
    UserService.delete_user(db, user_id, current_user)


# Reports


@router.get("/reports", response_model=List[schemas.ReportWithDetails])
def get_reports(
    status_filter: Optional[db_models.ReportStatus] = Query(
        default=None, alias="status", description="Only reports in this state"
    ),
    skip: PaginationSkip = 0,
    limit: PaginationLimitLarge = 100,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_moderator_user),
) -> List[db_models.ContentReport]:
    """Reports with the reported entry, its author and the reporter."""
    return ReportService.list_reports(
        db, current_user, status=status_filter, skip=skip, limit=limit
    )


@router.get("/entries/{entry_id}/reports", response_model=List[schemas.Report])
def get_reports_for_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_moderator_user),
) -> List[db_models.ContentReport]:
    """Reports filed against one entry."""
    return ReportService.list_reports_for_entry(db, entry_id, current_user)


@router.patch("/reports/{report_id}/status", response_model=schemas.Report)
def update_report_status(
    report_id: str,
    payload: schemas.ReportStatusUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_moderator_user),
) -> db_models.ContentReport:
    """Move a report through triage."""
    return ReportService.update_status(db, report_id, payload.status, current_user)


@router.delete("/reports/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(
    report_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_moderator_user),
) -> None:
    """Delete a report."""
    ReportService.delete_report(db, report_id, current_user)
