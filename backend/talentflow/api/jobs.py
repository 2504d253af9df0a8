"""Job endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from ..domain.models import JobStatus
from ..domain.schemas import (
    CandidateAssessmentRead,
    JobCreate,
    JobRead,
    JobReorder,
    JobUpdate,
)
from .deps import Services, get_services

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.get("", response_model=List[JobRead])
async def list_jobs(
    status: Optional[JobStatus] = None,
    title: Optional[str] = None,
    services: Services = Depends(get_services),
):
    """List jobs by board order, optionally filtered by status or title."""
    return await services.pipeline.list_jobs(status=status, title=title)


@router.post("", response_model=JobRead, status_code=status.HTTP_201_CREATED)
async def create_job(data: JobCreate, services: Services = Depends(get_services)):
    return await services.pipeline.create_job(
        data.title,
        data.status,
        description=data.description,
        requirements=data.requirements,
    )


@router.post("/reorder", response_model=List[JobRead])
async def reorder_jobs(data: JobReorder, services: Services = Depends(get_services)):
    """Set the board order; jobs left out keep their relative order after the listed ones."""
    return await services.pipeline.reorder_jobs(data.ordered_ids)


@router.get("/{job_id}", response_model=JobRead)
async def get_job(job_id: str, services: Services = Depends(get_services)):
    return await services.pipeline.get_job(job_id)


@router.patch("/{job_id}", response_model=JobRead)
async def update_job(
    job_id: str, data: JobUpdate, services: Services = Depends(get_services)
):
    """Edit a job or archive it with ``{"status": "archived"}``."""
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    return await services.pipeline.update_job(job_id, changes)


@router.get("/{job_id}/candidate-assessments", response_model=List[CandidateAssessmentRead])
async def candidate_assessments(job_id: str, services: Services = Depends(get_services)):
    """Gate status and latest timing for every candidate who reached the gate."""
    await services.pipeline.get_job(job_id)
    results = []
    for gate in await services.gate.statuses_for_job(job_id):
        timings = await services.gate.timings(gate.candidate_id, job_id)
        latest = timings[-1] if timings else None
        results.append(
            CandidateAssessmentRead(
                candidate_id=gate.candidate_id,
                job_id=job_id,
                status=gate.status,
                started_at=latest.started_at if latest else None,
                ended_at=latest.ended_at if latest else None,
            )
        )
    return results
