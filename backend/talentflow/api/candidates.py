"""Candidate profile, timeline and notes endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..domain.schemas import (
    CandidateCreate,
    CandidateRead,
    NoteCreate,
    NoteRead,
    TimelineEventRead,
)
from .deps import Services, get_services

router = APIRouter(prefix="/api/candidates", tags=["candidates"])


@router.post("", response_model=CandidateRead, status_code=status.HTTP_201_CREATED)
async def create_candidate(data: CandidateCreate, services: Services = Depends(get_services)):
    return await services.pipeline.create_candidate(data.name, data.email)


@router.get("/{candidate_id}", response_model=CandidateRead)
async def get_candidate(candidate_id: str, services: Services = Depends(get_services)):
    return await services.pipeline.get_candidate(candidate_id)


@router.get("/{candidate_id}/timeline", response_model=List[TimelineEventRead])
async def get_timeline(
    candidate_id: str,
    job_id: Optional[str] = Query(None, alias="jobId"),
    services: Services = Depends(get_services),
):
    await services.pipeline.get_candidate(candidate_id)
    return await services.engine.timeline(candidate_id, job_id=job_id)


@router.get("/{candidate_id}/notes", response_model=List[NoteRead])
async def list_notes(
    candidate_id: str,
    job_id: Optional[str] = Query(None, alias="jobId"),
    services: Services = Depends(get_services),
):
    return await services.pipeline.list_notes(candidate_id, job_id=job_id)


@router.post(
    "/{candidate_id}/notes",
    response_model=NoteRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_note(
    candidate_id: str, data: NoteCreate, services: Services = Depends(get_services)
):
    return await services.pipeline.add_note(candidate_id, data.job_id, data.content)
