"""Service container shared by the API routes."""

from dataclasses import dataclass

from fastapi import Request

from ..core.clock import Clock, utc_now
from ..services import AssessmentGate, PipelineService, WorkflowEngine
from ..store import MemoryStore, Store


@dataclass
class Services:
    store: Store
    gate: AssessmentGate
    engine: WorkflowEngine
    pipeline: PipelineService


def build_services(store: Store | None = None, clock: Clock = utc_now) -> Services:
    store = store or MemoryStore()
    gate = AssessmentGate(store, clock=clock)
    return Services(
        store=store,
        gate=gate,
        engine=WorkflowEngine(store, gate=gate, clock=clock),
        pipeline=PipelineService(store, clock=clock),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
