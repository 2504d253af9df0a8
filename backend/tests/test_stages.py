"""Tests for the stage order policy."""

import itertools

import pytest

from talentflow.domain.stages import (
    PIPELINE,
    REJECTED_INDEX,
    Stage,
    index_of,
    is_legal_transition,
)


def test_pipeline_order():
    assert [index_of(s) for s in PIPELINE] == [0, 1, 2, 3, 4]
    assert index_of(Stage.rejected) == REJECTED_INDEX
    assert index_of("screen") == 1


@pytest.mark.parametrize("stage", list(Stage))
def test_same_stage_is_not_a_transition(stage):
    assert is_legal_transition(stage, stage) is False


@pytest.mark.parametrize("stage", [s for s in Stage if s is not Stage.rejected])
def test_rejected_reachable_from_every_stage(stage):
    assert is_legal_transition(stage, Stage.rejected) is True


def test_forward_moves_may_skip_stages():
    assert is_legal_transition(Stage.applied, Stage.offer)
    assert is_legal_transition(Stage.screen, Stage.hired)


def test_backward_moves_are_illegal():
    for a, b in itertools.permutations(PIPELINE, 2):
        assert is_legal_transition(a, b) is (index_of(b) > index_of(a))


def test_no_way_out_of_terminal_stages():
    # Only `rejected` leaves `hired`, and nothing leaves `rejected`.
    assert [s for s in Stage if is_legal_transition(Stage.hired, s)] == [Stage.rejected]
    assert [s for s in Stage if is_legal_transition(Stage.rejected, s)] == []


def test_policy_is_pure():
    results = {
        (a, b): is_legal_transition(a, b) for a, b in itertools.product(Stage, Stage)
    }
    again = {
        (a, b): is_legal_transition(a, b) for a, b in itertools.product(Stage, Stage)
    }
    assert results == again
