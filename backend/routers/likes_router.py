from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.rate_limiter import limiter, write_limit
from repositories.database import get_db
from services.like_service import LikeService

router = APIRouter(tags=["likes"])


@router.get("/entries/{entry_id}/likes", response_model=List[schemas.Like])
def get_likes_for_entry(
    entry_id: str,
    token: Optional[str] = Query(default=None, description="Special access token"),
    db: Session = Depends(get_db),
    current_user: Optional[db_models.User] = Depends(auth.get_current_user_optional),
) -> List[db_models.Like]:
    """Get likes on an entry, newest first."""
    return LikeService.list_likes(db, entry_id, current_user, token)


@router.get("/entries/{entry_id}/likes/summary", response_model=schemas.LikeSummary)
def get_like_summary(
    entry_id: str,
    token: Optional[str] = Query(default=None, description="Special access token"),
    db: Session = Depends(get_db),
    current_user: Optional[db_models.User] = Depends(auth.get_current_user_optional),
) -> schemas.LikeSummary:
    """Like count and whether the caller liked the entry."""
    return LikeService.get_like_summary(db, entry_id, current_user, token)


@router.post(
    "/likes", response_model=schemas.Like, status_code=status.HTTP_201_CREATED
)
@limiter.limit(write_limit)
def like_entry(
    request: Request,
    like: schemas.LikeCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.Like:
    """
    Like an entry.

    Liking twice answers 409 Conflict.
    """
    return LikeService.like_entry(db, like.entry_id, current_user, token=like.token)


@router.delete("/likes/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def unlike_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> None:
    """Remove the caller's like. Succeeds even if there was none."""
    LikeService.unlike_entry(db, entry_id, current_user)
