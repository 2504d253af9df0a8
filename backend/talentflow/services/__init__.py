from .assessment_gate import AssessmentGate
from .pipeline import PipelineService, seed_demo_data
from .workflow import Outcome, TransitionResult, WorkflowEngine

__all__ = [
    "AssessmentGate",
    "Outcome",
    "PipelineService",
    "TransitionResult",
    "WorkflowEngine",
    "seed_demo_data",
]
