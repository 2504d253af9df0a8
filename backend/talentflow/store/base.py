"""Abstract record store used as the source of truth."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union


class Collection(str, Enum):
    jobs = "jobs"
    candidates = "candidates"
    applications = "applications"
    timeline_events = "timeline_events"
    notes = "notes"
    assessment_status = "assessment_status"
    assessment_timing = "assessment_timing"
    assessment_responses = "assessment_responses"


@dataclass(frozen=True)
class Put:
    """Insert or overwrite ``record`` under ``record.id``."""

    collection: Collection
    record: Any


@dataclass(frozen=True)
class Update:
    """Patch fields of an existing record.

    ``expect`` lists field values the stored record must still hold when
    the write is applied; a mismatch aborts the whole transaction.
    """

    collection: Collection
    id: str
    patch: Mapping[str, Any]
    expect: Mapping[str, Any] = field(default_factory=dict)


Operation = Union[Put, Update]
Predicate = Callable[[Any], bool]


class Store(ABC):
    """Keyed, per-collection record storage.

    Every method may raise :class:`~talentflow.core.errors.StorageError`.
    ``query`` returns records in insertion order.
    """

    @abstractmethod
    async def get(self, collection: Collection, record_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def query(
        self,
        collection: Collection,
        predicate: Optional[Predicate] = None,
        **fields: Any,
    ) -> List[Any]:
        ...

    @abstractmethod
    async def transaction(self, ops: Sequence[Operation]) -> List[Any]:
        """Apply ``ops`` all-or-nothing and return the written records."""

    async def put(self, collection: Collection, record: Any) -> Any:
        (written,) = await self.transaction([Put(collection, record)])
        return written

    async def update(
        self, collection: Collection, record_id: str, patch: Mapping[str, Any]
    ) -> Any:
        (written,) = await self.transaction([Update(collection, record_id, patch)])
        return written

    async def count(self, collection: Collection, **fields: Any) -> int:
        return len(await self.query(collection, **fields))
