"""Optimistic drag-and-drop board for one job's pipeline.

The board shows moves as soon as the user makes them and reconciles with
the workflow engine when the card is dropped. A rejected or failed move is
rolled back to the snapshot taken when the drag began, so outside a drag
gesture the board only ever shows what the engine confirmed.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Set, Tuple

from ..core.errors import ChannelError, StorageError, TalentFlowError, WorkflowError
from ..domain.models import Application
from ..domain.stages import STAGE_NAMES, Stage
from .channel import TransitionChannel

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    success = "success"
    warning = "warning"
    error = "error"


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity


@dataclass
class BoardViewState:
    """Applications for one job, in load order.

    Columns are derived by stage so a card keeps its relative position when
    it changes column and returns to it on rollback.
    """

    job_id: str
    applications: List[Application] = field(default_factory=list)

    @property
    def columns(self) -> Dict[Stage, Tuple[Application, ...]]:
        return {
            stage: tuple(a for a in self.applications if a.stage == stage)
            for stage in Stage
        }

    def find(self, application_id: str) -> Optional[Application]:
        return next((a for a in self.applications if a.id == application_id), None)

    def place(self, application: Application) -> None:
        """Replace the card with the same id by ``application``."""
        for i, current in enumerate(self.applications):
            if current.id == application.id:
                self.applications[i] = application
                return
        raise KeyError(application.id)

    def copy(self) -> "BoardViewState":
        return copy.deepcopy(self)


@dataclass
class DragGesture:
    application_id: str
    original: BoardViewState


class BoardController:
    def __init__(
        self,
        channel: TransitionChannel,
        notify: Optional[Callable[[Notification], None]] = None,
    ) -> None:
        self.channel = channel
        self._notify = notify
        self._state: Optional[BoardViewState] = None
        self._gesture: Optional[DragGesture] = None
        self._in_flight: Set[str] = set()

    @property
    def state(self) -> BoardViewState:
        if self._state is None:
            raise RuntimeError("board has not been loaded")
        return self._state

    @property
    def view(self) -> Mapping[Stage, Tuple[Application, ...]]:
        """Read-only columns for rendering."""
        return MappingProxyType(self.state.columns)

    @property
    def dragging(self) -> Optional[str]:
        return self._gesture.application_id if self._gesture else None

    def is_pending(self, application_id: str) -> bool:
        return application_id in self._in_flight

    async def load(self, job_id: str) -> bool:
        try:
            applications = await self.channel.fetch_applications(job_id)
        except TalentFlowError as exc:
            logger.warning("could not load board", extra={"job_id": job_id})
            self._emit(exc.message, Severity.error)
            return False
        self._state = BoardViewState(job_id=job_id, applications=list(applications))
        self._gesture = None
        return True

    def begin_drag(self, application_id: str) -> bool:
        if application_id in self._in_flight:
            self._emit("This candidate's last move is still being saved", Severity.warning)
            return False
        if self.state.find(application_id) is None:
            return False
        if self._gesture is not None:
            # A gesture that never dropped is abandoned.
            self._rollback(self._gesture)
        self._gesture = DragGesture(application_id, self.state.copy())
        return True

    def drag_over(self, target_stage: Optional[Stage]) -> None:
        stage = _as_stage(target_stage)
        if self._gesture is None or stage is None:
            return
        self._move(self._gesture.application_id, stage)

    async def drop(self, target_stage: Optional[Stage]) -> bool:
        """Finish the gesture; return whether a move was committed.

        A target that is not a known stage counts as no drop target.
        """
        gesture, self._gesture = self._gesture, None
        if gesture is None:
            return False

        application_id = gesture.application_id
        original_stage = gesture.original.find(application_id).stage
        target_stage = _as_stage(target_stage)
        if target_stage is None or target_stage == original_stage:
            self._rollback(gesture)
            return False

        self._move(application_id, target_stage)
        self._in_flight.add(application_id)
        try:
            confirmed = await self.channel.request_transition(application_id, target_stage)
        except (WorkflowError, StorageError, ChannelError) as exc:
            self._rollback(gesture)
            logger.info(
                "board move rolled back",
                extra={"application_id": application_id, "reason": exc.code},
            )
            self._emit(exc.message, Severity.error)
            return False
        finally:
            self._in_flight.discard(application_id)

        self.state.place(confirmed)
        self._emit(f"Candidate moved to {STAGE_NAMES[target_stage]}", Severity.success)
        return True

    def _move(self, application_id: str, stage: Stage) -> None:
        card = self.state.find(application_id)
        if card is not None and card.stage != stage:
            self.state.place(replace(card, stage=stage))

    def _rollback(self, gesture: DragGesture) -> None:
        # Only the dragged card changes during a gesture.
        self.state.place(gesture.original.find(gesture.application_id))

    def _emit(self, message: str, severity: Severity) -> None:
        if self._notify is not None:
            self._notify(Notification(message, severity))


def _as_stage(value: Optional[str]) -> Optional[Stage]:
    if value is None:
        return None
    try:
        return Stage(value)
    except ValueError:
        return None
