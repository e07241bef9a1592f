"""
HireBoard - Job listing for the board's job filter.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import List

from ..database import get_db
from ..models import Job
from ..rate_limit import limiter, RATE_LIMIT_READ
from ..schemas import JobSummary

router = APIRouter()


@router.get("", response_model=List[JobSummary])
@limiter.limit(RATE_LIMIT_READ)
def list_jobs(
    request: Request,
    db: Session = Depends(get_db),
):
    """List jobs, newest first."""
    return db.query(Job).order_by(Job.created_at.desc(), Job.id.asc()).all()
