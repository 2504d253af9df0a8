"""Board controller driving the HTTP API through the HTTP channel."""

import httpx
import pytest

from conftest import application_at, new_application
from talentflow.board import BoardController, HttpChannel, Severity
from talentflow.core.config import Settings
from talentflow.core.errors import ChannelError, GateBlocked, IllegalBackwardMove
from talentflow.domain import schemas
from talentflow.domain.stages import Stage
from talentflow.main import create_app


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def channel(app):
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
    return HttpChannel("http://test", client=client)


@pytest.mark.asyncio
async def test_fetch_and_move(channel, services):
    application = await new_application(services)

    (fetched,) = await channel.fetch_applications(application.job_id)
    assert fetched == application

    moved = await channel.request_transition(application.id, Stage.screen)
    assert moved.stage is Stage.screen
    assert (await services.pipeline.get_application(application.id)).stage is Stage.screen


@pytest.mark.asyncio
async def test_error_codes_map_to_exceptions(channel, services):
    offer = await application_at(services, Stage.offer)
    tech = await application_at(services, Stage.tech)

    with pytest.raises(IllegalBackwardMove) as exc:
        await channel.request_transition(offer.id, Stage.applied)
    assert exc.value.message == "Cannot move candidate to a previous stage"
    with pytest.raises(GateBlocked):
        await channel.request_transition(tech.id, Stage.hired)


@pytest.mark.asyncio
async def test_board_over_http(channel, services):
    application = await application_at(services, Stage.tech)
    notifications = []
    board = BoardController(channel, notify=notifications.append)
    await board.load(application.job_id)
    before = board.state.copy()

    board.begin_drag(application.id)
    assert await board.drop(Stage.offer) is False
    assert board.state == before
    assert notifications[-1].message == "Assessment is still pending"

    await services.gate.submit(application.candidate_id, application.job_id)
    board.begin_drag(application.id)
    assert await board.drop(Stage.offer) is True
    assert notifications[-1].severity is Severity.success
    assert [a.id for a in board.view[Stage.offer]] == [application.id]


@pytest.mark.asyncio
async def test_transport_failure_becomes_channel_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://test")
    channel = HttpChannel("http://test", client=client)

    with pytest.raises(ChannelError):
        await channel.request_transition("app_1", Stage.screen)
    await channel.aclose()


@pytest.mark.asyncio
async def test_unstructured_error_becomes_channel_error():
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway")),
        base_url="http://test",
    )
    channel = HttpChannel("http://test", client=client)

    with pytest.raises(ChannelError) as exc:
        await channel.fetch_applications("job_1")
    assert exc.value.details == {"status": 502}
    await channel.aclose()


@pytest.mark.asyncio
async def test_from_settings():
    channel = HttpChannel.from_settings(
        Settings(API_BASE_URL="http://api.internal:9000", HTTP_TIMEOUT=2.5)
    )

    assert channel.client.base_url.host == "api.internal"
    assert channel.client.base_url.port == 9000
    assert channel.client.timeout.connect == 2.5
    await channel.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    ["<html>proxy page</html>", '{"id": "app_1", "stage": "screen"}', "[1, 2]"],
)
async def test_unreadable_success_body_rolls_back_board(services, body):
    application = await new_application(services)
    listing = [
        schemas.ApplicationRead.model_validate(application).model_dump(by_alias=True, mode="json")
    ]

    def handler(request):
        if request.method == "GET":
            return httpx.Response(200, json=listing)
        return httpx.Response(200, text=body)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    notifications = []
    async with HttpChannel("http://test", client=client) as channel:
        board = BoardController(channel, notify=notifications.append)
        assert await board.load(application.job_id)
        before = board.state.copy()

        board.begin_drag(application.id)
        board.drag_over(Stage.screen)
        assert await board.drop(Stage.screen) is False

    assert board.state == before
    assert notifications[-1].message == "Could not reach the server"
    assert client.is_closed


@pytest.mark.asyncio
async def test_channel_closes_its_client():
    async with HttpChannel("http://test") as channel:
        assert not channel.client.is_closed
    assert channel.client.is_closed
