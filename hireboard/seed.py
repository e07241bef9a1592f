"""
HireBoard - Demo data.

Seeds two jobs and a spread of applicants across the pipeline so a fresh
store has something to show on the board.
"""
import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from .models import Applicant, ApplicantActivity, Job

logger = logging.getLogger("hireboard.seed")


def get_demo_jobs():
    return [
        {
            "title": "Community Engagement Officer",
            "department": "Operations",
            "location": "Brisbane, QLD",
            "status": "active",
        },
        {
            "title": "Junior Frontend Developer",
            "department": "Engineering",
            "location": "Remote",
            "status": "draft",
        },
    ]


def get_demo_applicants():
    """Applicant rows keyed to the demo jobs by index."""
    return [
        {
            "job": 0,
            "candidate_name": "Aaliyah Walker",
            "candidate_email": "aaliyah@example.com",
            "candidate_phone": "0400 000 000",
            "candidate_headline": "Community Programs Coordinator",
            "candidate_location": "Brisbane, QLD",
            "candidate_is_indigenous": True,
            "stage": "screening",
            "source": "referral",
            "days_ago": 6,
            "rating": 4,
            "scores": (80, 78, 95, 84),
            "tags": ["Strong cultural fit"],
            "is_bookmarked": True,
            "activity": ("note", "Screening call scheduled"),
        },
        {
            "job": 1,
            "candidate_name": "Noah Thompson",
            "candidate_email": "noah@example.com",
            "candidate_phone": "0400 000 001",
            "candidate_headline": "Frontend Developer",
            "candidate_location": "Remote",
            "candidate_is_indigenous": False,
            "stage": "applied",
            "source": "direct",
            "days_ago": 2,
            "rating": 3,
            "scores": (62, 40, 65, 56),
            "tags": ["Early career"],
            "is_bookmarked": False,
            "activity": ("application", "Applied via careers page"),
        },
        {
            "job": 0,
            "candidate_name": "Mia Nguyen",
            "candidate_email": "mia@example.com",
            "candidate_headline": "Events and Partnerships Lead",
            "candidate_location": "Gold Coast, QLD",
            "stage": "interview",
            "source": "linkedin",
            "days_ago": 12,
            "rating": 5,
            "scores": (88, 90, 82, 87),
            "tags": ["Stakeholder management"],
            "activity": ("stage_change", "Moved to Interview"),
        },
        {
            "job": 1,
            "candidate_name": "Jack Robinson",
            "candidate_email": "jack@example.com",
            "candidate_headline": "Bootcamp Graduate",
            "candidate_location": "Sydney, NSW",
            "stage": "phone-interview",
            "source": "seek",
            "days_ago": 4,
            "rating": 2,
            "scores": (55, 30, 70, 50),
            "activity": ("stage_change", "Moved to Phone Screen"),
        },
    ]


def seed_demo_data(db: Session) -> bool:
    """Insert demo jobs and applicants if the store has no jobs yet."""
    if db.query(Job).first():
        return False

    now = datetime.utcnow()
    jobs = []
    for data in get_demo_jobs():
        job = Job(**data)
        db.add(job)
        jobs.append(job)
    db.flush()

    demo_applicants = get_demo_applicants()
    for data in demo_applicants:
        data = dict(data)
        job = jobs[data.pop("job")]
        applied_at = now - timedelta(days=data.pop("days_ago"))
        skills, experience, cultural, overall = data.pop("scores")
        activity_type, description = data.pop("activity")
        applicant = Applicant(
            job_id=job.id,
            applied_at=applied_at,
            last_activity_at=applied_at,
            score_skills=skills,
            score_experience=experience,
            score_cultural=cultural,
            score_overall=overall,
            resume_name="resume.pdf",
            resume_url="#",
            **data,
        )
        applicant.activities.append(ApplicantActivity(
            activity_type=activity_type,
            description=description,
            actor="Hiring Team",
            created_at=applied_at,
        ))
        db.add(applicant)

    db.commit()
    logger.info(f"Seeded {len(jobs)} demo jobs and {len(demo_applicants)} applicants")
    return True
