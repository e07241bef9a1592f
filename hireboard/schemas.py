"""
HireBoard - Pydantic schemas for request/response validation.

Defines the applicant data model shared by the store API and the board
client. Field names are snake_case in Python and camelCase on the wire.
"""
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, List
from enum import Enum


# --- Enums for validated fields ---

class Stage(str, Enum):
    APPLIED = "applied"
    SCREENING = "screening"
    PHONE_INTERVIEW = "phone-interview"
    INTERVIEW = "interview"
    ASSESSMENT = "assessment"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


class ApplicantSource(str, Enum):
    DIRECT = "direct"
    REFERRAL = "referral"
    LINKEDIN = "linkedin"
    INDEED = "indeed"
    SEEK = "seek"
    AGENCY = "agency"
    OTHER = "other"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# --- Applicant Schemas ---

class CandidateProfile(CamelModel):
    id: str
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., max_length=254)
    phone: Optional[str] = None
    avatar: Optional[str] = None
    headline: Optional[str] = None
    location: Optional[str] = None
    is_indigenous: bool = False


class JobRef(CamelModel):
    id: str
    title: str
    department: Optional[str] = None


class ApplicantScores(CamelModel):
    skills: int = Field(0, ge=0, le=100)
    experience: int = Field(0, ge=0, le=100)
    cultural: int = Field(0, ge=0, le=100)
    overall: int = Field(0, ge=0, le=100)


class ApplicantNote(CamelModel):
    id: str
    content: str
    author: str
    created_at: datetime


class ApplicantActivity(CamelModel):
    type: str
    description: str
    date: datetime
    user: Optional[str] = None


class ResumeRef(CamelModel):
    name: str
    url: str


class Applicant(CamelModel):
    id: str
    candidate_id: str
    candidate: CandidateProfile
    job_id: str
    job: JobRef
    stage: Stage
    source: ApplicantSource = ApplicantSource.OTHER
    applied_at: datetime
    last_activity_at: datetime
    rating: int = Field(0, ge=0, le=5)
    scores: ApplicantScores = Field(default_factory=ApplicantScores)
    tags: List[str] = Field(default_factory=list)
    notes: List[ApplicantNote] = Field(default_factory=list)
    activities: List[ApplicantActivity] = Field(default_factory=list)
    resume: Optional[ResumeRef] = None
    is_bookmarked: bool = False


class ApplicantPage(CamelModel):
    applicants: List[Applicant]
    total: int


class JobSummary(CamelModel):
    id: str
    title: str
    department: Optional[str] = None
    status: Optional[str] = None


# --- Request bodies ---

class StageUpdate(CamelModel):
    stage: Stage


class BulkStageUpdate(CamelModel):
    applicant_ids: List[str]
    stage: Stage

    @field_validator('applicant_ids')
    @classmethod
    def validate_unique_ids(cls, v):
        if len(set(v)) != len(v):
            raise ValueError('applicantIds must be unique')
        return v


class NoteCreate(CamelModel):
    content: str = Field(..., max_length=5000)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('content required')
        return v


class RatingUpdate(CamelModel):
    rating: int = Field(..., ge=0, le=5)


class RejectRequest(CamelModel):
    reason: str = Field(..., max_length=2000)

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('reason required')
        return v


# --- Responses ---

class OkResponse(CamelModel):
    ok: bool = True


class BulkStageResult(OkResponse):
    updated: int


class NoteCreated(OkResponse):
    note: ApplicantNote


class BookmarkResult(OkResponse):
    is_bookmarked: bool
