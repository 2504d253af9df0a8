"""Error taxonomy and structured API error responses."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


def build_error_payload(
    code: str, message: str, details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class TalentFlowError(Exception):
    """Base error carrying an HTTP status, a stable code and a user message."""

    status_code = 500
    code = "internal_error"
    message = "Unexpected error"

    def __init__(
        self,
        message: str | None = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    @property
    def payload(self) -> Dict[str, Any]:
        return build_error_payload(self.code, self.message, self.details)


class WorkflowError(TalentFlowError):
    """A requested transition was refused by the workflow rules."""

    status_code = 409
    code = "workflow_error"


class ApplicationNotFound(WorkflowError):
    status_code = 404
    code = "not_found"
    message = "Application not found"


class IllegalBackwardMove(WorkflowError):
    code = "illegal_backward_move"
    message = "Cannot move candidate to a previous stage"


class GateBlocked(WorkflowError):
    code = "gate_blocked"
    message = "Assessment is still pending"


class RecordNotFound(TalentFlowError):
    status_code = 404
    code = "not_found"
    message = "Record not found"


class DuplicateApplication(TalentFlowError):
    status_code = 409
    code = "duplicate_application"
    message = "Candidate has already applied to this job"


class StorageError(TalentFlowError):
    """The persistence layer failed; the caller may retry."""

    status_code = 503
    code = "storage_error"
    message = "Could not save changes, please try again"


class StorageConflict(StorageError):
    """A guarded write found the record changed underneath it."""

    code = "storage_conflict"
    message = "The record was changed by another request, please retry"


class ChannelError(TalentFlowError):
    """The transport between the board and the workflow engine failed."""

    status_code = 502
    code = "channel_error"
    message = "Could not reach the server"


async def talentflow_error_handler(_: Request, exc: TalentFlowError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)
