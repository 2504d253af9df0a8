"""Transports the board controller uses to reach the workflow engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Type

import httpx

from ..core.config import Settings, get_settings
from ..core.errors import (
    ApplicationNotFound,
    ChannelError,
    GateBlocked,
    IllegalBackwardMove,
    StorageConflict,
    StorageError,
    TalentFlowError,
)
from ..domain import schemas
from ..domain.models import Application
from ..domain.stages import Stage
from ..services import PipelineService, WorkflowEngine

ERRORS_BY_CODE: Dict[str, Type[TalentFlowError]] = {
    ApplicationNotFound.code: ApplicationNotFound,
    IllegalBackwardMove.code: IllegalBackwardMove,
    GateBlocked.code: GateBlocked,
    StorageError.code: StorageError,
    StorageConflict.code: StorageConflict,
}


class TransitionChannel(ABC):
    @abstractmethod
    async def fetch_applications(self, job_id: str) -> List[Application]:
        ...

    @abstractmethod
    async def request_transition(self, application_id: str, stage: Stage) -> Application:
        """Return the application as confirmed by the engine."""


class LocalChannel(TransitionChannel):
    """Calls the engine in-process."""

    def __init__(self, engine: WorkflowEngine, pipeline: PipelineService) -> None:
        self.engine = engine
        self.pipeline = pipeline

    async def fetch_applications(self, job_id: str) -> List[Application]:
        return await self.pipeline.list_applications(job_id=job_id)

    async def request_transition(self, application_id: str, stage: Stage) -> Application:
        result = await self.engine.request_transition(application_id, stage)
        return result.application


class HttpChannel(TransitionChannel):
    """Talks to the HTTP API.

    Error payloads are turned back into the matching exception; anything
    that prevents a usable response raises :class:`ChannelError`.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "HttpChannel":
        settings = settings or get_settings()
        return cls(settings.API_BASE_URL, timeout=settings.HTTP_TIMEOUT)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "HttpChannel":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def fetch_applications(self, job_id: str) -> List[Application]:
        response = await self._send("GET", "/api/applications", params={"jobId": job_id})
        with _parsing(response):
            return [schemas.ApplicationRead(**item).to_model() for item in response.json()]

    async def request_transition(self, application_id: str, stage: Stage) -> Application:
        response = await self._send(
            "PATCH",
            f"/api/applications/{application_id}",
            json={"stage": Stage(stage).value},
        )
        with _parsing(response):
            return schemas.ApplicationRead(**response.json()).to_model()

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise ChannelError(details={"reason": str(exc)}) from exc
        if response.is_success:
            return response

        try:
            error = response.json()["error"]
        except (ValueError, KeyError, TypeError):
            raise ChannelError(details={"status": response.status_code})
        error_cls = ERRORS_BY_CODE.get(error.get("code"), ChannelError)
        raise error_cls(error.get("message"), details=error.get("details"))


@contextmanager
def _parsing(response: httpx.Response) -> Iterator[None]:
    """Turn an unreadable success body into :class:`ChannelError`."""
    try:
        yield
    except (ValueError, TypeError) as exc:
        raise ChannelError(
            details={"status": response.status_code, "reason": str(exc)}
        ) from exc
