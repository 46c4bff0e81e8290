from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PaginationLimit, PaginationSkip
from helpers.rate_limiter import limiter, write_limit
from repositories.database import get_db
from services.entry_service import EntryService

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("/approved", response_model=List[schemas.EntryWithAuthor])
def get_approved_entries(
    skip: PaginationSkip = 0,
    limit: PaginationLimit = 50,
    db: Session = Depends(get_db),
) -> List[db_models.WikiEntry]:
    """Public listing: approved, non-special entries, newest first."""
    return EntryService.list_approved_entries(db, skip=skip, limit=limit)


@router.get("/mine", response_model=List[schemas.OwnedEntry])
def get_my_entries(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> List[db_models.WikiEntry]:
    """Own entries in every state, with special access tokens."""
    return EntryService.list_user_entries(db, current_user.id)


@router.post(
    "", response_model=schemas.OwnedEntry, status_code=status.HTTP_201_CREATED
)
@limiter.limit(write_limit)
def create_entry(
    request: Request,
    entry: schemas.EntryCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.WikiEntry:
    """
    Create an entry. It starts pending whatever the request says.

    Domain exceptions are caught by centralized exception handlers.
    """
    return EntryService.create_entry(db, entry, current_user)


@router.get("/{entry_id}", response_model=schemas.EntryWithAuthor)
def get_entry(
    entry_id: str,
    token: Optional[str] = Query(default=None, description="Special access token"),
    db: Session = Depends(get_db),
    current_user: Optional[db_models.User] = Depends(auth.get_current_user_optional),
) -> db_models.WikiEntry:
    """
    Get one entry if the caller may read it.

    Unreadable entries answer 404 exactly like missing ones.
    """
    return EntryService.get_entry_for_viewer(db, entry_id, current_user, token)


@router.patch("/{entry_id}", response_model=schemas.OwnedEntry)
def update_entry(
    entry_id: str,
    entry: schemas.EntryUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.WikiEntry:
    """Owner edit; the entry goes back to pending moderation."""
    return EntryService.update_entry(db, entry_id, entry, current_user)


@router.patch("/{entry_id}/special", response_model=schemas.OwnedEntry)
def set_entry_special(
    entry_id: str,
    payload: schemas.EntrySpecialUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.WikiEntry:
    """Switch token-gated visibility on or off for an owned entry."""
    return EntryService.set_special(db, entry_id, payload.is_special, current_user)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> None:
    """Delete an entry (owner or admin) with its comments, likes and reports."""
    EntryService.delete_entry(db, entry_id, current_user)
