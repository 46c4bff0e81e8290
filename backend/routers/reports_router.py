from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.rate_limiter import limiter, report_limit
from repositories.database import get_db
from services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=schemas.Report, status_code=status.HTTP_201_CREATED)
@limiter.limit(report_limit)
def create_report(
    request: Request,
    report: schemas.ReportCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.ContentReport:
    """
    Report an entry to the moderators.

    Domain exceptions are caught by centralized exception handlers.
    """
    return ReportService.create_report(db, report, current_user)
