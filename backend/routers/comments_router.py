from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PaginationLimit, PaginationSkip
from helpers.rate_limiter import limiter, write_limit
from repositories.database import get_db
from services.comment_service import CommentService

router = APIRouter(tags=["comments"])


@router.get("/entries/{entry_id}/comments", response_model=List[schemas.Comment])
def get_comments_for_entry(
    entry_id: str,
    token: Optional[str] = Query(default=None, description="Special access token"),
    skip: PaginationSkip = 0,
    limit: PaginationLimit = 50,
    db: Session = Depends(get_db),
    current_user: Optional[db_models.User] = Depends(auth.get_current_user_optional),
) -> List[db_models.Comment]:
    """
    Get comments on an entry, newest first.

    Comments of an entry the caller may not read answer 404.
    """
    return CommentService.get_comments_for_entry(
        db, entry_id, current_user, token, skip=skip, limit=limit
    )


@router.post(
    "/comments", response_model=schemas.Comment, status_code=status.HTTP_201_CREATED
)
@limiter.limit(write_limit)
def create_comment(
    request: Request,
    comment: schemas.CommentCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.Comment:
    """Comment on an entry."""
    return CommentService.create_comment(
        db, comment.entry_id, comment.content, current_user, token=comment.token
    )


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> None:
    """Delete a comment (its author or a moderator)."""
    CommentService.delete_comment(db, comment_id, current_user)
