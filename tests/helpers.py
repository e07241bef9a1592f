"""
Test helpers: applicant builders and an in-memory store double.
"""

import asyncio
from datetime import datetime
from typing import Dict, List

from hireboard.client import StoreTransportError
from hireboard.schemas import (
    Applicant, ApplicantNote, ApplicantPage, CandidateProfile, JobRef, JobSummary, Stage
)
from hireboard.stages import stage_id


def make_applicant(applicant_id, stage="applied", **fields):
    """Build an Applicant schema with sensible defaults."""
    now = datetime(2026, 1, 15, 9, 30)
    data = dict(
        id=applicant_id,
        candidate_id=f"cand-{applicant_id}",
        candidate=CandidateProfile(
            id=f"cand-{applicant_id}",
            name=f"Candidate {applicant_id}",
            email=f"{applicant_id.lower()}@example.com",
        ),
        job_id="job-1",
        job=JobRef(id="job-1", title="Community Engagement Officer", department="Operations"),
        stage=stage,
        applied_at=now,
        last_activity_at=now,
    )
    data.update(fields)
    return Applicant(**data)


class FakeStore:
    """
    In-memory stand-in for ApplicantStoreClient.

    - `calls` records (method, *args) for every call
    - `fail` holds method names that raise StoreTransportError
    - `hold(name)` makes the next call of `name` wait until the returned event is set
    """

    def __init__(self, applicants: List[Applicant] = ()):
        self.base_url = "http://fake-store/api"
        self.applicants: Dict[str, Applicant] = {a.id: a for a in applicants}
        self.jobs = [JobSummary(id="job-1", title="Community Engagement Officer", status="active")]
        self.calls = []
        self.fail = set()
        self._holds: Dict[str, List[asyncio.Event]] = {}
        self._note_seq = 0

    def hold(self, name: str) -> asyncio.Event:
        event = asyncio.Event()
        self._holds.setdefault(name, []).append(event)
        return event

    def calls_to(self, name: str):
        return [call for call in self.calls if call[0] == name]

    async def _enter(self, name, *args):
        self.calls.append((name,) + args)
        held = self._holds.get(name)
        if held:
            await held.pop(0).wait()
        if name in self.fail:
            raise StoreTransportError(f"{name}: connection refused")

    def _patch(self, applicant_id, **changes):
        if applicant_id in self.applicants:
            self.applicants[applicant_id] = self.applicants[applicant_id].model_copy(update=changes)

    async def list_applicants(self, filters=None):
        await self._enter("list_applicants", filters)
        params = filters.to_params() if filters else {}
        items = [
            a for a in self.applicants.values()
            if ("stage" not in params or stage_id(a.stage) == params["stage"])
            and ("query" not in params or params["query"].lower() in a.candidate.name.lower())
        ]
        return ApplicantPage(applicants=items, total=len(items))

    async def get_applicant(self, applicant_id):
        # answered with the row as it was when the request was served
        applicant = self.applicants[applicant_id]
        await self._enter("get_applicant", applicant_id)
        return applicant

    async def list_jobs(self):
        await self._enter("list_jobs")
        return list(self.jobs)

    async def move_to_stage(self, applicant_id, stage):
        await self._enter("move_to_stage", applicant_id, stage_id(stage))
        self._patch(applicant_id, stage=Stage(stage_id(stage)))

    async def bulk_move(self, applicant_ids, stage):
        ids = list(applicant_ids)
        await self._enter("bulk_move", ids, stage_id(stage))
        for applicant_id in ids:
            self._patch(applicant_id, stage=Stage(stage_id(stage)))
        return len(ids)

    async def add_note(self, applicant_id, content):
        await self._enter("add_note", applicant_id, content)
        self._note_seq += 1
        note = ApplicantNote(
            id=str(self._note_seq), content=content, author="recruiter@example.com",
            created_at=datetime(2026, 1, 16, 10, 0),
        )
        current = self.applicants[applicant_id]
        self._patch(applicant_id, notes=current.notes + [note])
        return note

    async def update_rating(self, applicant_id, rating):
        await self._enter("update_rating", applicant_id, rating)
        self._patch(applicant_id, rating=rating)

    async def toggle_bookmark(self, applicant_id):
        await self._enter("toggle_bookmark", applicant_id)
        flipped = not self.applicants[applicant_id].is_bookmarked
        self._patch(applicant_id, is_bookmarked=flipped)
        return flipped

    async def reject(self, applicant_id, reason):
        await self._enter("reject", applicant_id, reason)
        self._patch(applicant_id, stage=Stage.REJECTED)
