"""Pipeline stages and the forward-only ordering policy."""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class Stage(str, Enum):
    applied = "applied"
    screen = "screen"
    tech = "tech"
    offer = "offer"
    hired = "hired"
    rejected = "rejected"


PIPELINE: Tuple[Stage, ...] = (
    Stage.applied,
    Stage.screen,
    Stage.tech,
    Stage.offer,
    Stage.hired,
)

# Stage whose exit waits on the candidate's assessment.
GATED_STAGE = Stage.tech

# `rejected` sits after every ordered stage so nothing is forward of it.
REJECTED_INDEX = len(PIPELINE)

STAGE_NAMES = {
    Stage.applied: "Applied",
    Stage.screen: "Screening",
    Stage.tech: "Technical Interview",
    Stage.offer: "Offer",
    Stage.hired: "Hired",
    Stage.rejected: "Rejected",
}


def index_of(stage: Stage) -> int:
    """Return the position of ``stage`` in the pipeline.

    Example:
        >>> index_of(Stage.tech)
        2
        >>> index_of(Stage.rejected) == REJECTED_INDEX
        True
    """
    stage = Stage(stage)
    if stage is Stage.rejected:
        return REJECTED_INDEX
    return PIPELINE.index(stage)


def is_legal_transition(from_stage: Stage, to_stage: Stage) -> bool:
    """Return whether moving from ``from_stage`` to ``to_stage`` is allowed.

    Moves are forward-only and may skip stages. ``rejected`` is reachable
    from anywhere; staying put is never a transition.

    Example:
        >>> is_legal_transition(Stage.applied, Stage.offer)
        True
        >>> is_legal_transition(Stage.offer, Stage.screen)
        False
    """
    from_stage, to_stage = Stage(from_stage), Stage(to_stage)
    if from_stage is to_stage:
        return False
    if to_stage is Stage.rejected:
        return True
    return index_of(to_stage) > index_of(from_stage)
