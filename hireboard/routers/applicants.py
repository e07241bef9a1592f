"""
HireBoard - Applicant store API.

Endpoints the pipeline board reads and mutates: filtered listing, detail,
stage transitions (single and bulk), notes, rating, bookmark and reject.
Every mutation bumps the applicant's last activity and adds a timeline entry.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..dependencies import get_actor
from ..models import Applicant, ApplicantNote
from ..query_helpers import applicant_query, get_or_404, note_to_schema, to_schema, touch
from ..rate_limit import limiter, RATE_LIMIT_BULK, RATE_LIMIT_GENERAL, RATE_LIMIT_READ
from ..schemas import (
    Applicant as ApplicantSchema, ApplicantPage, BookmarkResult, BulkStageResult,
    BulkStageUpdate, NoteCreate, NoteCreated, OkResponse, RatingUpdate, RejectRequest,
    Stage, StageUpdate
)
from ..stages import get_stage

logger = logging.getLogger("hireboard.store")

router = APIRouter()


def _stage_label(stage: Stage) -> str:
    entry = get_stage(stage)
    return entry.name if entry else stage.value.capitalize()


def _set_stage(applicant: Applicant, stage: Stage, actor: str) -> None:
    if applicant.stage == stage.value:
        return
    applicant.stage = stage.value
    touch(applicant, "stage_change", f"Moved to {_stage_label(stage)}", actor)


@router.get("", response_model=ApplicantPage)
@limiter.limit(RATE_LIMIT_READ)
def list_applicants(
    request: Request,
    job: Optional[str] = None,
    stage: Optional[str] = None,
    source: Optional[str] = None,
    query: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """List applicants, filtered by job, stage, source and candidate name/email."""
    page_size = min(limit or settings.store.default_page_size, settings.store.max_page_size)
    base = applicant_query(
        db,
        job_id=job or None,
        stage=stage or None,
        source=source or None,
        search=(query or "").strip() or None,
    )
    total = base.count()
    rows = base.offset((page - 1) * page_size).limit(page_size).all()
    return ApplicantPage(applicants=[to_schema(a) for a in rows], total=total)


@router.put("/bulk/stage", response_model=BulkStageResult)
@limiter.limit(RATE_LIMIT_BULK)
def bulk_move_stage(
    request: Request,
    payload: BulkStageUpdate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
):
    """Move several applicants to one stage. Unknown ids are skipped."""
    applicants = []
    if payload.applicant_ids:
        applicants = db.query(Applicant).filter(Applicant.id.in_(payload.applicant_ids)).all()
    for applicant in applicants:
        _set_stage(applicant, payload.stage, actor)
    db.commit()

    skipped = len(payload.applicant_ids) - len(applicants)
    if skipped:
        logger.warning(f"Bulk move skipped {skipped} unknown applicant id(s)")
    logger.info(f"{actor} moved {len(applicants)} applicant(s) to {payload.stage.value}")
    return BulkStageResult(updated=len(applicants))


@router.get("/{applicant_id}", response_model=ApplicantSchema)
@limiter.limit(RATE_LIMIT_READ)
def get_applicant(
    request: Request,
    applicant_id: str,
    db: Session = Depends(get_db),
):
    """Get a single applicant with notes and activity timeline."""
    return to_schema(get_or_404(db, Applicant, applicant_id, "Applicant"))


@router.put("/{applicant_id}/stage", response_model=OkResponse)
@limiter.limit(RATE_LIMIT_GENERAL)
def move_applicant_stage(
    request: Request,
    applicant_id: str,
    payload: StageUpdate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
):
    """Move an applicant to a pipeline stage (or `rejected`)."""
    applicant = get_or_404(db, Applicant, applicant_id, "Applicant")
    _set_stage(applicant, payload.stage, actor)
    db.commit()
    return OkResponse()


@router.post("/{applicant_id}/notes", response_model=NoteCreated)
@limiter.limit(RATE_LIMIT_GENERAL)
def add_note(
    request: Request,
    applicant_id: str,
    payload: NoteCreate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
):
    """Append a note; id, author and timestamp are assigned here."""
    applicant = get_or_404(db, Applicant, applicant_id, "Applicant")
    note = ApplicantNote(content=payload.content, author=actor)
    applicant.notes.append(note)
    touch(applicant, "note", "Note added", actor)
    db.commit()
    db.refresh(note)
    return NoteCreated(note=note_to_schema(note))


@router.put("/{applicant_id}/rating", response_model=OkResponse)
@limiter.limit(RATE_LIMIT_GENERAL)
def update_rating(
    request: Request,
    applicant_id: str,
    payload: RatingUpdate,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
):
    """Set the applicant's 0-5 star rating."""
    applicant = get_or_404(db, Applicant, applicant_id, "Applicant")
    applicant.rating = payload.rating
    touch(applicant, "rating", f"Rated {payload.rating}/5", actor)
    db.commit()
    return OkResponse()


@router.post("/{applicant_id}/bookmark", response_model=BookmarkResult)
@limiter.limit(RATE_LIMIT_GENERAL)
def toggle_bookmark(
    request: Request,
    applicant_id: str,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
):
    """Flip the bookmark flag and return its new value."""
    applicant = get_or_404(db, Applicant, applicant_id, "Applicant")
    applicant.is_bookmarked = not applicant.is_bookmarked
    touch(applicant, "bookmark", "Bookmarked" if applicant.is_bookmarked else "Bookmark removed", actor)
    db.commit()
    return BookmarkResult(is_bookmarked=applicant.is_bookmarked)


@router.post("/{applicant_id}/reject", response_model=OkResponse)
@limiter.limit(RATE_LIMIT_GENERAL)
def reject_applicant(
    request: Request,
    applicant_id: str,
    payload: RejectRequest,
    db: Session = Depends(get_db),
    actor: str = Depends(get_actor),
):
    """Reject an applicant with a reason. Rejected applicants have no board column."""
    applicant = get_or_404(db, Applicant, applicant_id, "Applicant")
    applicant.stage = Stage.REJECTED.value
    applicant.rejection_reason = payload.reason
    touch(applicant, "rejected", f"Rejected: {payload.reason}", actor)
    db.commit()
    logger.info(f"{actor} rejected applicant {applicant_id}")
    return OkResponse()
