"""Pipeline and dashboard counters."""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query

from ..domain.schemas import DashboardStats
from .deps import Services, get_services

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/pipeline-stats")
async def pipeline_stats(
    job_id: Optional[str] = Query(None, alias="jobId"),
    services: Services = Depends(get_services),
) -> Dict[str, int]:
    counts = await services.pipeline.pipeline_stats(job_id=job_id)
    return {stage.value: count for stage, count in counts.items()}


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(services: Services = Depends(get_services)):
    return DashboardStats(**await services.pipeline.dashboard_stats())
