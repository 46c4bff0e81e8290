"""
Share links for special entries.

A special entry is readable by anyone holding its link; the link carries the
access token as a query parameter.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services.entry_service import EntryService

router = APIRouter(prefix="/special", tags=["special"])


@router.get("/{entry_id}", response_model=schemas.EntryWithAuthor)
def get_special_entry(
    entry_id: str,
    token: Optional[str] = Query(default=None, description="Special access token"),
    db: Session = Depends(get_db),
    current_user: Optional[db_models.User] = Depends(auth.get_current_user_optional),
) -> db_models.WikiEntry:
    """Read an entry through its share link."""
    return EntryService.get_entry_for_viewer(db, entry_id, current_user, token)
