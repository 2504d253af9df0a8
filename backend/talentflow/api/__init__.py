from fastapi import APIRouter

from . import applications, assessments, candidates, health, jobs, stats

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(jobs.router)
api_router.include_router(applications.router)
api_router.include_router(candidates.router)
api_router.include_router(assessments.router)
api_router.include_router(stats.router)
