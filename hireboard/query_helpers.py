"""
Reusable query helpers for the applicant store routers.

Lookup-or-404, list filtering, activity recording and ORM -> schema
conversion live here so the routers stay thin.
"""
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .models import Applicant, ApplicantActivity
from .schemas import (
    Applicant as ApplicantSchema, ApplicantActivity as ActivitySchema,
    ApplicantNote as NoteSchema, ApplicantScores, CandidateProfile, JobRef, ResumeRef
)


def get_or_404(db: Session, model, record_id: str, label: str = "Record"):
    """Fetch a record by primary key, or raise 404."""
    record = db.query(model).filter(model.id == record_id).first()
    if not record:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record


def applicant_query(
    db: Session,
    job_id: Optional[str] = None,
    stage: Optional[str] = None,
    source: Optional[str] = None,
    search: Optional[str] = None,
):
    """Applicants matching the list endpoint's filters, newest application first."""
    query = db.query(Applicant)
    if job_id:
        query = query.filter(Applicant.job_id == job_id)
    if stage:
        query = query.filter(Applicant.stage == stage)
    if source:
        query = query.filter(Applicant.source == source)
    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                Applicant.candidate_name.ilike(search_term),
                Applicant.candidate_email.ilike(search_term),
            )
        )
    return query.order_by(Applicant.applied_at.desc(), Applicant.id.asc())


def touch(applicant: Applicant, activity_type: str, description: str, actor: Optional[str] = None):
    """Bump last activity and record an entry on the applicant's timeline."""
    now = datetime.utcnow()
    applicant.last_activity_at = now
    applicant.activities.append(ApplicantActivity(
        activity_type=activity_type,
        description=description,
        actor=actor,
        created_at=now,
    ))


def to_schema(applicant: Applicant) -> ApplicantSchema:
    """Build the wire representation of an applicant row."""
    resume = None
    if applicant.resume_url:
        resume = ResumeRef(name=applicant.resume_name or "resume", url=applicant.resume_url)

    return ApplicantSchema(
        id=applicant.id,
        candidate_id=applicant.candidate_id,
        candidate=CandidateProfile(
            id=applicant.candidate_id,
            name=applicant.candidate_name,
            email=applicant.candidate_email,
            phone=applicant.candidate_phone,
            avatar=applicant.candidate_avatar,
            headline=applicant.candidate_headline,
            location=applicant.candidate_location,
            is_indigenous=bool(applicant.candidate_is_indigenous),
        ),
        job_id=applicant.job_id,
        job=JobRef(
            id=applicant.job.id,
            title=applicant.job.title,
            department=applicant.job.department,
        ),
        stage=applicant.stage,
        source=applicant.source,
        applied_at=applicant.applied_at,
        last_activity_at=applicant.last_activity_at or applicant.applied_at,
        rating=applicant.rating or 0,
        scores=ApplicantScores(
            skills=applicant.score_skills or 0,
            experience=applicant.score_experience or 0,
            cultural=applicant.score_cultural or 0,
            overall=applicant.score_overall or 0,
        ),
        tags=list(applicant.tags or []),
        notes=[note_to_schema(n) for n in applicant.notes],
        activities=[
            ActivitySchema(
                type=a.activity_type,
                description=a.description,
                date=a.created_at,
                user=a.actor,
            )
            for a in applicant.activities
        ],
        resume=resume,
        is_bookmarked=bool(applicant.is_bookmarked),
    )


def note_to_schema(note) -> NoteSchema:
    return NoteSchema(
        id=str(note.id),
        content=note.content,
        author=note.author,
        created_at=note.created_at,
    )
