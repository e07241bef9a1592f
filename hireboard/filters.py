"""
HireBoard - Board filters.

Maps the board's filter controls onto query parameters for the store's
list endpoint. The store does the filtering; nothing here filters
applicants locally.
"""
from pydantic import BaseModel, field_validator
from typing import Dict, Optional

from .schemas import ApplicantSource, Stage


class FilterSpec(BaseModel):
    """Job / stage / source / free-text filters for the applicant list."""
    job_id: Optional[str] = None
    stage: Optional[Stage] = None
    source: Optional[ApplicantSource] = None
    query: Optional[str] = None

    class Config:
        frozen = True
        extra = "forbid"

    @field_validator('job_id', 'stage', 'source', 'query', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('job_id', 'query')
    @classmethod
    def strip_text(cls, v):
        return v.strip() if v is not None else v

    def to_params(self) -> Dict[str, str]:
        """Request parameters for GET /applicants; unset fields are omitted."""
        params = {}
        if self.job_id:
            params["job"] = self.job_id
        if self.stage is not None:
            params["stage"] = self.stage.value
        if self.source is not None:
            params["source"] = self.source.value
        if self.query:
            params["query"] = self.query
        return params

    def replace(self, **changes) -> "FilterSpec":
        """A validated copy with `changes` applied."""
        data = self.model_dump()
        data.update(changes)
        return FilterSpec(**data)

    def is_empty(self) -> bool:
        return not self.to_params()
