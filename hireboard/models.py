"""
HireBoard - SQLAlchemy ORM models

Applicant store tables: jobs, applicants, and the applicants' notes and
activity timeline. Candidate profile and score fields are stored flat on
the applicant row.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, CheckConstraint, JSON
from sqlalchemy.orm import relationship

from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String, nullable=False)
    department = Column(String)
    location = Column(String)
    status = Column(String, default="draft")  # draft, active, closed
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    applicants = relationship("Applicant", back_populates="job")


class Applicant(Base):
    __tablename__ = "applicants"
    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_applicant_rating"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)

    # Candidate profile
    candidate_id = Column(String(36), nullable=False, default=_uuid)
    candidate_name = Column(String, nullable=False)
    candidate_email = Column(String, nullable=False)
    candidate_phone = Column(String)
    candidate_avatar = Column(String)
    candidate_headline = Column(String)
    candidate_location = Column(String)
    candidate_is_indigenous = Column(Boolean, default=False)

    stage = Column(String, nullable=False, default="applied", index=True)
    source = Column(String, nullable=False, default="direct")  # direct, referral, linkedin, indeed, seek, agency, other
    applied_at = Column(DateTime, default=datetime.utcnow)
    last_activity_at = Column(DateTime, default=datetime.utcnow)
    rating = Column(Integer, default=0)

    # Match scores, 0-100
    score_skills = Column(Integer, default=0)
    score_experience = Column(Integer, default=0)
    score_cultural = Column(Integer, default=0)
    score_overall = Column(Integer, default=0)

    tags = Column(JSON, default=list)
    resume_name = Column(String)
    resume_url = Column(String)
    is_bookmarked = Column(Boolean, default=False)
    rejection_reason = Column(Text)

    # Relationships
    job = relationship("Job", back_populates="applicants")
    notes = relationship(
        "ApplicantNote",
        back_populates="applicant",
        order_by="ApplicantNote.id",
        cascade="all, delete-orphan",
    )
    activities = relationship(
        "ApplicantActivity",
        back_populates="applicant",
        order_by="ApplicantActivity.id.desc()",
        cascade="all, delete-orphan",
    )


class ApplicantNote(Base):
    __tablename__ = "applicant_notes"

    id = Column(Integer, primary_key=True, index=True)
    applicant_id = Column(String(36), ForeignKey("applicants.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    author = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    applicant = relationship("Applicant", back_populates="notes")


class ApplicantActivity(Base):
    __tablename__ = "applicant_activities"

    id = Column(Integer, primary_key=True, index=True)
    applicant_id = Column(String(36), ForeignKey("applicants.id"), nullable=False, index=True)
    activity_type = Column(String, nullable=False)  # application, stage_change, note, rating, bookmark, rejected
    description = Column(Text, nullable=False)
    actor = Column(String)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    applicant = relationship("Applicant", back_populates="activities")
