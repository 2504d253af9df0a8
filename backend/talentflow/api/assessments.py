"""Assessment submission endpoints used by the assessment runtime."""

from fastapi import APIRouter, Depends

from ..core.errors import RecordNotFound
from ..domain.schemas import (
    AssessmentResponseRead,
    AssessmentSubmission,
    AssessmentSubmissionResult,
)
from .deps import Services, get_services

router = APIRouter(tags=["assessments"])


@router.post("/api/assessments/{job_id}/submit", response_model=AssessmentSubmissionResult)
async def submit_assessment(
    job_id: str,
    data: AssessmentSubmission,
    services: Services = Depends(get_services),
):
    """Close the candidate's assessment gate for ``job_id``.

    A submission with no pending gate is accepted as a no-op so the runtime
    can safely resend.
    """
    application = await services.pipeline.get_application(data.application_id)
    if application.job_id != job_id:
        raise RecordNotFound(
            "Application does not belong to this job",
            details={"application_id": application.id, "job_id": job_id},
        )
    accepted = await services.gate.submit(
        application.candidate_id,
        job_id,
        responses=data.responses,
        application_id=application.id,
    )
    return AssessmentSubmissionResult(
        application_id=application.id,
        accepted=accepted,
        status=await services.gate.current_status(application.candidate_id, job_id),
    )


@router.get(
    "/api/assessment-responses/{application_id}",
    response_model=AssessmentResponseRead,
)
async def get_responses(application_id: str, services: Services = Depends(get_services)):
    response = await services.gate.responses_for(application_id)
    if response is None:
        raise RecordNotFound(
            "No assessment responses for this application",
            details={"application_id": application_id},
        )
    return response
