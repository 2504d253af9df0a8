"""Jobs, candidates, applications and notes around the workflow engine."""

from __future__ import annotations

import logging
import random
import re
from typing import Any, Dict, List, Optional

from ..core.clock import Clock, new_id, utc_now
from ..core.errors import DuplicateApplication, RecordNotFound
from ..domain.models import Application, Candidate, Job, JobStatus, Note
from ..domain.stages import Stage
from ..store import Collection, Store, Update

logger = logging.getLogger(__name__)

MENTION_RE = re.compile(r"@(\w+)")


class PipelineService:
    def __init__(self, store: Store, clock: Clock = utc_now) -> None:
        self.store = store
        self.clock = clock

    # Jobs

    async def create_job(
        self,
        title: str,
        status: JobStatus = JobStatus.active,
        description: str = "",
        requirements: str = "",
    ) -> Job:
        order = await self.store.count(Collection.jobs) + 1
        return await self.store.put(
            Collection.jobs,
            Job(
                id=new_id("job"),
                title=title,
                description=description,
                requirements=requirements,
                status=JobStatus(status),
                order=order,
            ),
        )

    async def list_jobs(
        self, status: Optional[JobStatus] = None, title: Optional[str] = None
    ) -> List[Job]:
        """Jobs by board order.

        ``title`` is a case-insensitive search over title, description and
        requirements.
        """
        jobs = await self.store.query(Collection.jobs)
        if status is not None:
            jobs = [j for j in jobs if j.status == JobStatus(status)]
        if title:
            term = title.lower()
            jobs = [
                j
                for j in jobs
                if any(term in text.lower() for text in (j.title, j.description, j.requirements))
            ]
        return sorted(jobs, key=lambda j: j.order)

    async def get_job(self, job_id: str) -> Job:
        return await self._require(Collection.jobs, job_id, "Job not found")

    async def update_job(self, job_id: str, changes: Dict[str, Any]) -> Job:
        """Edit or archive a job; ``changes`` holds only the fields to set."""
        await self.get_job(job_id)
        if "status" in changes:
            changes = {**changes, "status": JobStatus(changes["status"])}
        job = await self.store.update(Collection.jobs, job_id, changes)
        logger.info("job updated", extra={"job_id": job_id})
        return job

    async def reorder_jobs(self, ordered_ids: List[str]) -> List[Job]:
        """Put ``ordered_ids`` first, in that order; other jobs keep their
        relative order after them.
        """
        current = await self.list_jobs()
        known = {j.id for j in current}
        missing = [i for i in ordered_ids if i not in known]
        if missing:
            raise RecordNotFound("Job not found", details={"ids": missing})
        leading = list(dict.fromkeys(ordered_ids))
        order = leading + [j.id for j in current if j.id not in leading]
        await self.store.transaction(
            [
                Update(Collection.jobs, job_id, {"order": position})
                for position, job_id in enumerate(order, start=1)
            ]
        )
        return await self.list_jobs()

    # Candidates

    async def create_candidate(self, name: str, email: str) -> Candidate:
        return await self.store.put(
            Collection.candidates,
            Candidate(id=new_id("cand"), name=name, email=email.lower()),
        )

    async def get_candidate(self, candidate_id: str) -> Candidate:
        return await self._require(Collection.candidates, candidate_id, "Candidate not found")

    # Applications

    async def apply(self, candidate_id: str, job_id: str) -> Application:
        """Create an application at the first stage of the pipeline."""
        await self.get_candidate(candidate_id)
        await self.get_job(job_id)
        if await self.store.query(
            Collection.applications, candidate_id=candidate_id, job_id=job_id
        ):
            raise DuplicateApplication(
                details={"candidate_id": candidate_id, "job_id": job_id}
            )
        application = Application(
            id=new_id("app"),
            candidate_id=candidate_id,
            job_id=job_id,
            stage=Stage.applied,
            applied_at=self.clock(),
        )
        logger.info(
            "application created",
            extra={"application_id": application.id, "job_id": job_id},
        )
        return await self.store.put(Collection.applications, application)

    async def get_application(self, application_id: str) -> Application:
        return await self._require(
            Collection.applications, application_id, "Application not found"
        )

    async def list_applications(
        self, job_id: Optional[str] = None, candidate_id: Optional[str] = None
    ) -> List[Application]:
        fields = {}
        if job_id is not None:
            fields["job_id"] = job_id
        if candidate_id is not None:
            fields["candidate_id"] = candidate_id
        return await self.store.query(Collection.applications, **fields)

    # Notes

    async def add_note(self, candidate_id: str, job_id: str, content: str) -> Note:
        await self.get_candidate(candidate_id)
        await self.get_job(job_id)
        note = Note(
            id=new_id("note"),
            candidate_id=candidate_id,
            job_id=job_id,
            content=content.strip(),
            mentions=tuple(MENTION_RE.findall(content)),
            created_at=self.clock(),
        )
        return await self.store.put(Collection.notes, note)

    async def list_notes(self, candidate_id: str, job_id: Optional[str] = None) -> List[Note]:
        fields = {"candidate_id": candidate_id}
        if job_id is not None:
            fields["job_id"] = job_id
        return await self.store.query(Collection.notes, **fields)

    # Stats

    async def pipeline_stats(self, job_id: Optional[str] = None) -> Dict[Stage, int]:
        counts = {stage: 0 for stage in Stage}
        for application in await self.list_applications(job_id=job_id):
            counts[Stage(application.stage)] += 1
        return counts

    async def dashboard_stats(self) -> Dict[str, int]:
        return {
            "total_jobs": await self.store.count(Collection.jobs),
            "active_jobs": await self.store.count(Collection.jobs, status=JobStatus.active),
            "total_candidates": await self.store.count(Collection.candidates),
            "total_applications": await self.store.count(Collection.applications),
            "total_hired": await self.store.count(Collection.applications, stage=Stage.hired),
        }

    async def _require(self, collection: Collection, record_id: str, message: str):
        record = await self.store.get(collection, record_id)
        if record is None:
            raise RecordNotFound(message, details={"id": record_id})
        return record


DEMO_JOBS = ("Backend Engineer", "Frontend Engineer", "Data Analyst", "Product Designer")
DEMO_FIRST = ("Alice", "Bala", "Carol", "Diego", "Esha", "Farid", "Grace", "Hiro")
DEMO_LAST = ("Nguyen", "Rao", "Smith", "Garcia", "Kim", "Okafor", "Rossi", "Chen")


async def seed_demo_data(
    service: PipelineService, candidates: int, applications: int, seed: int = 7
) -> None:
    """Populate an empty store with jobs, candidates and `applied` applications."""
    if await service.store.count(Collection.candidates):
        return
    rng = random.Random(seed)
    jobs = [await service.create_job(title) for title in DEMO_JOBS]
    people = []
    for i in range(candidates):
        first, last = rng.choice(DEMO_FIRST), rng.choice(DEMO_LAST)
        people.append(
            await service.create_candidate(
                f"{first} {last}", f"{first}.{last}{i}@example.com"
            )
        )

    pairs = {(c.id, j.id) for c in people for j in jobs}
    for candidate_id, job_id in rng.sample(sorted(pairs), min(applications, len(pairs))):
        await service.apply(candidate_id, job_id)
    logger.info("seeded demo data")
