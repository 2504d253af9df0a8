"""Application endpoints, including stage changes through the workflow engine."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..domain.schemas import ApplicationCreate, ApplicationRead, StageUpdate
from .deps import Services, get_services

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.get("", response_model=List[ApplicationRead])
async def list_applications(
    job_id: Optional[str] = Query(None, alias="jobId"),
    candidate_id: Optional[str] = Query(None, alias="candidateId"),
    services: Services = Depends(get_services),
):
    return await services.pipeline.list_applications(
        job_id=job_id, candidate_id=candidate_id
    )


@router.post("", response_model=ApplicationRead, status_code=status.HTTP_201_CREATED)
async def create_application(
    data: ApplicationCreate, services: Services = Depends(get_services)
):
    return await services.pipeline.apply(data.candidate_id, data.job_id)


@router.get("/{application_id}", response_model=ApplicationRead)
async def get_application(application_id: str, services: Services = Depends(get_services)):
    return await services.pipeline.get_application(application_id)


@router.patch("/{application_id}", response_model=ApplicationRead)
async def change_stage(
    application_id: str,
    data: StageUpdate,
    services: Services = Depends(get_services),
):
    """Request a stage change.

    Refused moves come back as 404 (unknown application), 409 with code
    ``gate_blocked`` or ``illegal_backward_move``, or 503 when storage fails.
    """
    result = await services.engine.request_transition(application_id, data.stage)
    return result.application
