"""Assessment gate guarding exit from the technical stage.

A candidate entering the gated stage owes an assessment for that job. Until
the assessment runtime reports a submission the gate stays ``pending`` and
the workflow engine refuses to move the application out of the stage.
Each visit to the stage opens its own timing record.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..core.clock import Clock, new_id, utc_now
from ..domain.models import (
    AssessmentGateStatus,
    AssessmentResponse,
    AssessmentTiming,
    GateStatus,
    gate_key,
)
from ..store import Collection, Operation, Put, Store, Update

logger = logging.getLogger(__name__)


class AssessmentGate:
    def __init__(self, store: Store, clock: Clock = utc_now) -> None:
        self.store = store
        self.clock = clock

    async def current_status(self, candidate_id: str, job_id: str) -> GateStatus:
        record = await self.store.get(
            Collection.assessment_status, gate_key(candidate_id, job_id)
        )
        return record.status if record is not None else GateStatus.none

    async def may_leave_gate(self, candidate_id: str, job_id: str) -> bool:
        return await self.current_status(candidate_id, job_id) != GateStatus.pending

    async def entry_ops(self, candidate_id: str, job_id: str) -> List[Operation]:
        """Build the writes that open the gate, for use inside a transaction.

        Re-entering while still pending overwrites the open timing record
        instead of starting a second one.
        """
        timing_id = None
        if await self.current_status(candidate_id, job_id) == GateStatus.pending:
            open_timing = await self._open_timing(candidate_id, job_id)
            if open_timing is not None:
                timing_id = open_timing.id
        timing = AssessmentTiming(
            id=timing_id or new_id("tim"),
            candidate_id=candidate_id,
            job_id=job_id,
            started_at=self.clock(),
        )
        status = AssessmentGateStatus(
            candidate_id=candidate_id, job_id=job_id, status=GateStatus.pending
        )
        return [
            Put(Collection.assessment_status, status),
            Put(Collection.assessment_timing, timing),
        ]

    async def enter_gate(self, candidate_id: str, job_id: str) -> AssessmentTiming:
        _, timing = await self.store.transaction(
            await self.entry_ops(candidate_id, job_id)
        )
        logger.info(
            "assessment gate opened",
            extra={"candidate_id": candidate_id, "job_id": job_id},
        )
        return timing

    async def submit(
        self,
        candidate_id: str,
        job_id: str,
        responses: Optional[Dict[str, Any]] = None,
        application_id: Optional[str] = None,
    ) -> bool:
        """Record that the candidate finished the assessment.

        Returns ``False`` without writing anything when no gate is pending,
        so repeated submission events are harmless.
        """
        if await self.current_status(candidate_id, job_id) != GateStatus.pending:
            logger.info(
                "ignoring assessment submission without a pending gate",
                extra={"candidate_id": candidate_id, "job_id": job_id},
            )
            return False

        now = self.clock()
        key = gate_key(candidate_id, job_id)
        ops: List[Operation] = [
            Update(
                Collection.assessment_status,
                key,
                {"status": GateStatus.submitted},
                expect={"status": GateStatus.pending},
            )
        ]
        open_timing = await self._open_timing(candidate_id, job_id)
        if open_timing is not None:
            ops.append(
                Update(
                    Collection.assessment_timing,
                    open_timing.id,
                    {"ended_at": now},
                    expect={"ended_at": None},
                )
            )
        if responses is not None and application_id is not None:
            ops.append(
                Put(
                    Collection.assessment_responses,
                    AssessmentResponse(
                        id=application_id,
                        application_id=application_id,
                        candidate_id=candidate_id,
                        job_id=job_id,
                        submitted_at=now,
                        responses=dict(responses),
                    ),
                )
            )
        await self.store.transaction(ops)
        logger.info(
            "assessment submitted",
            extra={"candidate_id": candidate_id, "job_id": job_id},
        )
        return True

    async def timings(self, candidate_id: str, job_id: str) -> List[AssessmentTiming]:
        return await self.store.query(
            Collection.assessment_timing, candidate_id=candidate_id, job_id=job_id
        )

    async def statuses_for_job(self, job_id: str) -> List[AssessmentGateStatus]:
        return await self.store.query(Collection.assessment_status, job_id=job_id)

    async def responses_for(self, application_id: str) -> Optional[AssessmentResponse]:
        return await self.store.get(Collection.assessment_responses, application_id)

    async def _open_timing(
        self, candidate_id: str, job_id: str
    ) -> Optional[AssessmentTiming]:
        open_timings = [
            t for t in await self.timings(candidate_id, job_id) if t.ended_at is None
        ]
        return open_timings[-1] if open_timings else None
