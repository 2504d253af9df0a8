"""In-process store with serialized, all-or-nothing transactions."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..core.errors import StorageConflict, StorageError
from .base import Collection, Operation, Predicate, Put, Store, Update

logger = logging.getLogger(__name__)


class MemoryStore(Store):
    """Dict-backed store.

    Transactions run one at a time under a lock and write into a staged
    copy of the data, which replaces the live data only when every
    operation succeeded.
    """

    def __init__(self) -> None:
        self._data: Dict[Collection, Dict[str, Any]] = {c: {} for c in Collection}
        self._lock = asyncio.Lock()

    async def get(self, collection: Collection, record_id: str) -> Optional[Any]:
        return self._data[Collection(collection)].get(record_id)

    async def query(
        self,
        collection: Collection,
        predicate: Optional[Predicate] = None,
        **fields: Any,
    ) -> List[Any]:
        records = self._data[Collection(collection)].values()
        return [
            r
            for r in records
            if all(getattr(r, k) == v for k, v in fields.items())
            and (predicate is None or predicate(r))
        ]

    async def transaction(self, ops: Sequence[Operation]) -> List[Any]:
        async with self._lock:
            staged = {c: dict(records) for c, records in self._data.items()}
            written = [self._apply(staged, op) for op in ops]
            self._data = staged
        logger.debug("store transaction committed", extra={"ops": len(written)})
        return written

    def _apply(self, staged: Dict[Collection, Dict[str, Any]], op: Operation) -> Any:
        if isinstance(op, Put):
            staged[Collection(op.collection)][op.record.id] = op.record
            return op.record
        if isinstance(op, Update):
            records = staged[Collection(op.collection)]
            current = records.get(op.id)
            if current is None:
                raise StorageError(
                    f"{op.collection.value}/{op.id} does not exist",
                    details={"collection": op.collection.value, "id": op.id},
                )
            for name, expected in op.expect.items():
                if getattr(current, name) != expected:
                    raise StorageConflict(
                        details={
                            "collection": op.collection.value,
                            "id": op.id,
                            "field": name,
                        }
                    )
            updated = dataclasses.replace(current, **op.patch)
            records[op.id] = updated
            return updated
        raise TypeError(f"Unsupported store operation: {op!r}")
