"""Core domain entities represented as immutable dataclasses.

Records are persisted as-is by the store and replaced, never mutated, when
they change. They carry no persistence or API concerns.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Tuple

from .stages import Stage


class JobStatus(str, Enum):
    active = "active"
    archived = "archived"


class GateStatus(str, Enum):
    none = "none"
    pending = "pending"
    submitted = "submitted"


@dataclass(frozen=True)
class Job:
    """Open position that candidates apply to.

    Example:
        >>> Job(id="job_1", title="Backend Engineer")
    """

    id: str
    title: str
    description: str = ""
    requirements: str = ""
    status: JobStatus = JobStatus.active
    order: int = 0


@dataclass(frozen=True)
class Candidate:
    """Person applying to one or more jobs.

    Example:
        >>> Candidate(id="cand_1", name="Carol", email="c@example.com")
    """

    id: str
    name: str
    email: str


@dataclass(frozen=True)
class Application:
    """One candidate's pursuit of one job.

    Example:
        >>> Application(
        ...     id="app_1",
        ...     candidate_id="cand_1",
        ...     job_id="job_1",
        ...     stage=Stage.applied,
        ...     applied_at=datetime(2024, 1, 1, 9, 0),
        ... )
    """

    id: str
    candidate_id: str
    job_id: str
    stage: Stage
    applied_at: datetime


@dataclass(frozen=True)
class TimelineEvent:
    """Append-only record of one accepted stage change.

    Example:
        >>> TimelineEvent(
        ...     id="evt_1",
        ...     application_id="app_1",
        ...     candidate_id="cand_1",
        ...     job_id="job_1",
        ...     from_stage=Stage.applied,
        ...     to_stage=Stage.screen,
        ...     occurred_at=datetime(2024, 1, 2, 9, 0),
        ... )
    """

    id: str
    application_id: str
    candidate_id: str
    job_id: str
    from_stage: Stage
    to_stage: Stage
    occurred_at: datetime


@dataclass(frozen=True)
class Note:
    """Free-text note left by a team member on a candidate.

    Example:
        >>> Note(
        ...     id="note_1",
        ...     candidate_id="cand_1",
        ...     job_id="job_1",
        ...     content="Strong systems answers, cc @Alice",
        ...     mentions=("Alice",),
        ...     created_at=datetime(2024, 1, 3, 9, 0),
        ... )
    """

    id: str
    candidate_id: str
    job_id: str
    content: str
    mentions: Tuple[str, ...]
    created_at: datetime


@dataclass(frozen=True)
class AssessmentGateStatus:
    """Whether a candidate owes the gating assessment for a job."""

    candidate_id: str
    job_id: str
    status: GateStatus

    @property
    def id(self) -> str:
        return gate_key(self.candidate_id, self.job_id)


@dataclass(frozen=True)
class AssessmentTiming:
    """Wall-clock span of one visit to the gated stage.

    Example:
        >>> AssessmentTiming(
        ...     id="tim_1",
        ...     candidate_id="cand_1",
        ...     job_id="job_1",
        ...     started_at=datetime(2024, 1, 4, 9, 0),
        ... )
    """

    id: str
    candidate_id: str
    job_id: str
    started_at: datetime
    ended_at: datetime | None = None


@dataclass(frozen=True)
class AssessmentResponse:
    """Answers a candidate submitted for a job's assessment."""

    id: str
    application_id: str
    candidate_id: str
    job_id: str
    submitted_at: datetime
    responses: Dict[str, Any] = field(default_factory=dict)


def gate_key(candidate_id: str, job_id: str) -> str:
    """Return the store key for a (candidate, job) gate record."""
    return f"{candidate_id}:{job_id}"
