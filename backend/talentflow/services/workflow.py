"""Workflow engine: the single authority over an application's stage.

A transition request is checked in a fixed order:

1. the application must exist,
2. asking for the current stage is an idempotent no-op,
3. leaving the gated stage requires the assessment gate to be open,
4. the move must be legal under the forward-only stage policy.

An accepted move updates the application, appends a timeline event and,
when entering the gated stage, opens the assessment gate, all in one store
transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..core.clock import Clock, new_id, utc_now
from ..core.errors import ApplicationNotFound, GateBlocked, IllegalBackwardMove
from ..domain.models import Application, TimelineEvent
from ..domain.stages import GATED_STAGE, Stage, is_legal_transition
from ..store import Collection, Operation, Put, Store, Update
from .assessment_gate import AssessmentGate

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    accepted = "accepted"
    noop = "noop"


@dataclass(frozen=True)
class TransitionResult:
    outcome: Outcome
    application: Application
    from_stage: Stage
    to_stage: Stage
    event: Optional[TimelineEvent] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is Outcome.accepted


class WorkflowEngine:
    def __init__(
        self,
        store: Store,
        gate: Optional[AssessmentGate] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self.gate = gate or AssessmentGate(store, clock=clock)
        self.clock = clock

    async def request_transition(
        self, application_id: str, target_stage: Stage
    ) -> TransitionResult:
        """Move an application to ``target_stage``.

        Raises:
            ApplicationNotFound: no application has ``application_id``.
            GateBlocked: the application sits in the gated stage and its
                assessment is still pending.
            IllegalBackwardMove: the stage policy forbids the move.
            StorageError: the transaction failed; nothing was written.
        """
        target_stage = Stage(target_stage)
        application = await self.store.get(Collection.applications, application_id)
        if application is None:
            raise ApplicationNotFound(details={"application_id": application_id})

        from_stage = Stage(application.stage)
        log_extra = {
            "application_id": application_id,
            "from_stage": from_stage,
            "to_stage": target_stage,
        }

        if from_stage is target_stage:
            logger.debug("transition is a no-op", extra=log_extra)
            return TransitionResult(Outcome.noop, application, from_stage, target_stage)

        if from_stage is GATED_STAGE and not await self.gate.may_leave_gate(
            application.candidate_id, application.job_id
        ):
            logger.info("transition blocked by assessment gate", extra=log_extra)
            raise GateBlocked(details={"application_id": application_id})

        if not is_legal_transition(from_stage, target_stage):
            logger.info("transition rejected as backward move", extra=log_extra)
            raise IllegalBackwardMove(
                details={
                    "application_id": application_id,
                    "from_stage": from_stage.value,
                    "to_stage": target_stage.value,
                }
            )

        event = TimelineEvent(
            id=new_id("evt"),
            application_id=application.id,
            candidate_id=application.candidate_id,
            job_id=application.job_id,
            from_stage=from_stage,
            to_stage=target_stage,
            occurred_at=self.clock(),
        )
        ops: List[Operation] = [
            Update(
                Collection.applications,
                application.id,
                {"stage": target_stage},
                expect={"stage": from_stage},
            ),
            Put(Collection.timeline_events, event),
        ]
        if target_stage is GATED_STAGE:
            ops.extend(
                await self.gate.entry_ops(application.candidate_id, application.job_id)
            )

        updated, *_ = await self.store.transaction(ops)
        logger.info("transition accepted", extra=log_extra)
        return TransitionResult(
            Outcome.accepted, updated, from_stage, target_stage, event=event
        )

    async def timeline(
        self, candidate_id: str, job_id: Optional[str] = None
    ) -> List[TimelineEvent]:
        """Return the candidate's accepted transitions in acceptance order."""
        fields = {"candidate_id": candidate_id}
        if job_id is not None:
            fields["job_id"] = job_id
        return await self.store.query(Collection.timeline_events, **fields)
