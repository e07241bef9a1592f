"""
HireBoard - Pipeline stage catalog and board partitioning.

The catalog is static configuration: its order is the Kanban column order
and drives the "move to next stage" default. `rejected` is a valid stage
value but has no column.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from .schemas import Applicant, Stage


@dataclass(frozen=True)
class PipelineStage:
    id: str
    name: str
    color: str


PIPELINE_STAGES: List[PipelineStage] = [
    PipelineStage(Stage.APPLIED.value, "Applied", "gray"),
    PipelineStage(Stage.SCREENING.value, "Screening", "blue"),
    PipelineStage(Stage.PHONE_INTERVIEW.value, "Phone Screen", "indigo"),
    PipelineStage(Stage.INTERVIEW.value, "Interview", "purple"),
    PipelineStage(Stage.ASSESSMENT.value, "Assessment", "orange"),
    PipelineStage(Stage.OFFER.value, "Offer", "yellow"),
    PipelineStage(Stage.HIRED.value, "Hired", "green"),
]

# Stage value outside the catalog; applicants here are not shown on the board
TERMINAL_STAGE = Stage.REJECTED.value


def stage_id(stage: Union[Stage, str]) -> str:
    """Plain string id for a Stage member or raw value."""
    return stage.value if isinstance(stage, Stage) else str(stage)


def is_valid_stage(value) -> bool:
    """True for catalog stage ids and `rejected`."""
    try:
        Stage(stage_id(value))
    except ValueError:
        return False
    return True


def get_stage(value, stages: List[PipelineStage] = PIPELINE_STAGES) -> Optional[PipelineStage]:
    """Look up a catalog entry; None for `rejected` or unknown ids."""
    key = stage_id(value)
    for stage in stages:
        if stage.id == key:
            return stage
    return None


def next_stage(current, stages: List[PipelineStage] = PIPELINE_STAGES) -> str:
    """
    Default target of "move next".

    The stage after `current` in the catalog, or `hired` past the end.
    A stage outside the catalog (rejected) restarts at the first column.
    """
    ids = [s.id for s in stages]
    key = stage_id(current)
    index = ids.index(key) if key in ids else -1
    if index + 1 < len(ids):
        return ids[index + 1]
    return Stage.HIRED.value


def partition_by_stage(
    applicants: Iterable[Applicant],
    stages: List[PipelineStage] = PIPELINE_STAGES,
) -> Dict[str, List[Applicant]]:
    """
    Group applicants into board columns.

    Returns a dict keyed by every catalog stage id, in catalog order. Each
    bucket keeps the relative order of `applicants`; applicants whose stage
    has no column are left out. The input is not modified.
    """
    buckets: Dict[str, List[Applicant]] = {s.id: [] for s in stages}
    for applicant in applicants:
        bucket = buckets.get(stage_id(applicant.stage))
        if bucket is not None:
            bucket.append(applicant)
    return buckets


def stage_counts(partition: Dict[str, List[Applicant]]) -> Dict[str, int]:
    """Column header counts for a partition."""
    return {key: len(items) for key, items in partition.items()}
