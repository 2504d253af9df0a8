"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta
from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))
from talentflow.api.deps import Services, build_services  # noqa: E402
from talentflow.core.clock import UTC  # noqa: E402
from talentflow.domain.models import Application  # noqa: E402
from talentflow.domain.stages import Stage  # noqa: E402
from talentflow.store import MemoryStore  # noqa: E402


class FakeClock:
    """Deterministic clock advancing one minute per reading."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def services(store, clock) -> Services:
    return build_services(store, clock=clock)


async def new_application(services: Services, job_title: str = "Backend Engineer") -> Application:
    """Create a job, a candidate and an application at `applied`."""
    job = await services.pipeline.create_job(job_title)
    candidate = await services.pipeline.create_candidate("Carol Chen", "carol@example.com")
    return await services.pipeline.apply(candidate.id, job.id)


async def application_at(services: Services, stage: Stage) -> Application:
    """Walk a fresh application forward to ``stage``.

    Passing through the gated stage submits the assessment on the way, so
    the application is never left with a pending gate unless ``stage`` is
    the gated stage itself.
    """
    application = await new_application(services)
    if stage is Stage.applied:
        return application
    if stage is Stage.rejected:
        return (await services.engine.request_transition(application.id, stage)).application
    for step in (Stage.screen, Stage.tech, Stage.offer, Stage.hired):
        application = (
            await services.engine.request_transition(application.id, step)
        ).application
        if step is stage:
            break
        if step is Stage.tech:
            await services.gate.submit(application.candidate_id, application.job_id)
    return application
