"""Pydantic models used for request and response bodies.

These data transfer objects (DTOs) mirror the domain models but add
validation and camelCase serialization for the API layer.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel

from . import models
from .models import GateStatus, JobStatus
from .stages import Stage


class Schema(BaseModel):
    class Config:
        frozen = True
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class JobCreate(Schema):
    """Job posting request.

    Example:
        >>> JobCreate(title="Backend Engineer", requirements="Python, SQL")
    """

    title: str = Field(min_length=1)
    description: str = ""
    requirements: str = ""
    status: JobStatus = JobStatus.active


class JobUpdate(Schema):
    """Partial job edit; unset fields are left alone.

    Example:
        >>> JobUpdate(status="archived")
    """

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    requirements: Optional[str] = None
    status: Optional[JobStatus] = None


class JobReorder(Schema):
    ordered_ids: List[str] = Field(min_length=1)

    class Config:
        json_schema_extra = {"example": {"orderedIds": ["job_2", "job_1"]}}


class JobRead(Schema):
    id: str
    title: str
    description: str
    requirements: str
    status: JobStatus
    order: int


class CandidateCreate(Schema):
    """Candidate registration.

    Example:
        >>> CandidateCreate(name="Carol", email="c@example.com")
    """

    name: str = Field(min_length=1)
    email: EmailStr


class CandidateRead(Schema):
    id: str
    name: str
    email: EmailStr


class ApplicationCreate(Schema):
    """Candidate applying to a job.

    Example:
        >>> ApplicationCreate(candidate_id="cand_1", job_id="job_1")
    """

    candidate_id: str
    job_id: str

    class Config:
        json_schema_extra = {
            "example": {"candidateId": "cand_1", "jobId": "job_1"}
        }


class ApplicationRead(Schema):
    id: str
    candidate_id: str
    job_id: str
    stage: Stage
    applied_at: datetime

    def to_model(self) -> models.Application:
        return models.Application(**self.model_dump())


class StageUpdate(Schema):
    """Requested stage for an application.

    Example:
        >>> StageUpdate(stage="screen")
    """

    stage: Stage

    class Config:
        json_schema_extra = {"example": {"stage": "screen"}}


class TimelineEventRead(Schema):
    id: str
    application_id: str
    candidate_id: str
    job_id: str
    from_stage: Stage
    to_stage: Stage
    occurred_at: datetime


class NoteCreate(Schema):
    """Note left on a candidate for a job.

    Example:
        >>> NoteCreate(content="Great call, cc @Alice", job_id="job_1")
    """

    content: str = Field(min_length=1)
    job_id: str


class NoteRead(Schema):
    id: str
    candidate_id: str
    job_id: str
    content: str
    mentions: List[str]
    created_at: datetime


class AssessmentSubmission(Schema):
    """Answers posted by the assessment runtime.

    Example:
        >>> AssessmentSubmission(application_id="app_1", responses={"q1": "42"})
    """

    application_id: str
    responses: Dict[str, Any] = Field(default_factory=dict)


class AssessmentSubmissionResult(Schema):
    application_id: str
    accepted: bool
    status: GateStatus


class AssessmentResponseRead(Schema):
    application_id: str
    candidate_id: str
    job_id: str
    submitted_at: datetime
    responses: Dict[str, Any]


class CandidateAssessmentRead(Schema):
    candidate_id: str
    job_id: str
    status: GateStatus
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class DashboardStats(Schema):
    total_jobs: int
    active_jobs: int
    total_candidates: int
    total_applications: int
    total_hired: int
