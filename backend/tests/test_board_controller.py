"""Tests for the optimistic board controller."""

import asyncio

import pytest

from conftest import application_at, new_application
from talentflow.board import BoardController, LocalChannel, Severity
from talentflow.core.errors import StorageError
from talentflow.domain.stages import Stage


class RecordingChannel(LocalChannel):
    """Local channel that counts calls and can hold or fail them."""

    def __init__(self, engine, pipeline):
        super().__init__(engine, pipeline)
        self.calls = []
        self.release = None
        self.fail_with = None

    async def request_transition(self, application_id, stage):
        self.calls.append((application_id, stage))
        if self.release is not None:
            await self.release.wait()
        if self.fail_with is not None:
            raise self.fail_with
        return await super().request_transition(application_id, stage)


@pytest.fixture
def channel(services):
    return RecordingChannel(services.engine, services.pipeline)


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def board(channel, notifications):
    return BoardController(channel, notify=notifications.append)


async def _loaded(board, application):
    assert await board.load(application.job_id)
    return board.state.copy()


@pytest.mark.asyncio
async def test_accepted_move_commits(board, services, notifications):
    application = await new_application(services)
    await _loaded(board, application)

    assert board.begin_drag(application.id)
    board.drag_over(Stage.screen)
    assert await board.drop(Stage.screen) is True

    assert [a.id for a in board.view[Stage.screen]] == [application.id]
    assert board.view[Stage.applied] == ()
    assert (await services.pipeline.get_application(application.id)).stage is Stage.screen
    assert notifications[-1].message == "Candidate moved to Screening"
    assert notifications[-1].severity is Severity.success
    assert board.dragging is None


@pytest.mark.asyncio
async def test_backward_drop_rolls_back(board, services, notifications):
    application = await application_at(services, Stage.offer)
    before = await _loaded(board, application)

    board.begin_drag(application.id)
    board.drag_over(Stage.screen)
    assert board.state.find(application.id).stage is Stage.screen

    assert await board.drop(Stage.screen) is False

    assert board.state == before
    assert notifications[-1].message == "Cannot move candidate to a previous stage"
    assert notifications[-1].severity is Severity.error


@pytest.mark.asyncio
async def test_gate_blocked_drop_rolls_back(board, services, notifications):
    application = await application_at(services, Stage.tech)
    before = await _loaded(board, application)

    board.begin_drag(application.id)
    assert await board.drop(Stage.offer) is False

    assert board.state == before
    assert notifications[-1].message == "Assessment is still pending"


@pytest.mark.asyncio
async def test_storage_failure_rolls_back(board, channel, services, notifications):
    application = await new_application(services)
    before = await _loaded(board, application)
    channel.fail_with = StorageError("connection reset")

    board.begin_drag(application.id)
    board.drag_over(Stage.screen)
    assert await board.drop(Stage.screen) is False

    assert board.state == before
    assert notifications[-1].message == "connection reset"


@pytest.mark.asyncio
async def test_rollback_restores_other_cards(board, services):
    first = await new_application(services)
    candidate = await services.pipeline.create_candidate("Dan Diaz", "dan@example.com")
    second = await services.pipeline.apply(candidate.id, first.job_id)
    await services.engine.request_transition(second.id, Stage.offer)
    before = await _loaded(board, first)

    board.begin_drag(second.id)
    for stage in (Stage.hired, Stage.applied, Stage.screen):
        board.drag_over(stage)
    await board.drop(Stage.screen)

    assert board.state == before
    assert [a.id for a in board.view[Stage.offer]] == [second.id]


@pytest.mark.asyncio
@pytest.mark.parametrize("target", [None, Stage.applied])
async def test_drop_without_move_skips_engine(board, channel, services, notifications, target):
    application = await new_application(services)
    before = await _loaded(board, application)

    board.begin_drag(application.id)
    board.drag_over(Stage.offer)
    assert await board.drop(target) is False

    assert channel.calls == []
    assert board.state == before
    assert notifications == []


@pytest.mark.asyncio
async def test_new_drag_abandons_previous_gesture(board, services):
    application = await new_application(services)
    before = await _loaded(board, application)

    board.begin_drag(application.id)
    board.drag_over(Stage.offer)
    board.begin_drag(application.id)

    assert board.state == before


@pytest.mark.asyncio
async def test_in_flight_card_cannot_be_dragged(board, channel, services, notifications):
    application = await new_application(services)
    await _loaded(board, application)
    channel.release = asyncio.Event()

    board.begin_drag(application.id)
    drop = asyncio.ensure_future(board.drop(Stage.screen))
    await asyncio.sleep(0)

    assert board.is_pending(application.id)
    assert board.begin_drag(application.id) is False
    assert notifications[-1].severity is Severity.warning

    channel.release.set()
    assert await drop is True
    assert not board.is_pending(application.id)
    assert board.begin_drag(application.id) is True
    assert len(channel.calls) == 1


@pytest.mark.asyncio
async def test_failed_load_notifies(board, notifications):
    class BrokenChannel(RecordingChannel):
        async def fetch_applications(self, job_id):
            raise StorageError("store offline")

    board.channel = BrokenChannel(None, None)

    assert await board.load("job_1") is False
    assert notifications[-1].message == "store offline"
    with pytest.raises(RuntimeError):
        board.state


@pytest.mark.asyncio
async def test_unknown_drop_target_rolls_back(board, channel, services, notifications):
    application = await new_application(services)
    before = await _loaded(board, application)

    board.begin_drag(application.id)
    board.drag_over(Stage.offer)
    board.drag_over("archive")
    assert board.state.find(application.id).stage is Stage.offer

    assert await board.drop("archive") is False

    assert board.state == before
    assert board.dragging is None
    assert channel.calls == []
    assert notifications == []
