import json

import httpx
import pytest

from hubspot_mcp.connectors.hubspot_crm import HubSpotCRM
from hubspot_mcp.handle import ClientHandle
from hubspot_mcp.hubspot import HubSpotClient
from hubspot_mcp.ratelimit import SlidingWindowLimiter


class FakeClock:
    """Monotonic clock whose sleep just moves time forward."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class Recorder:
    """MockTransport handler that records requests and replays queued responses."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            r = self.responses.pop(0)
            return r(request) if callable(r) else r
        return httpx.Response(200, json={"id": "1", "properties": {}})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def clock():
    return FakeClock()


def make_client(recorder: Recorder, clock: FakeClock) -> HubSpotClient:
    limiter = SlidingWindowLimiter(clock=clock, sleep=clock.sleep)
    return HubSpotClient(
        "test-token",
        limiter=limiter,
        transport=httpx.MockTransport(recorder),
        sleep=clock.sleep,
    )


def make_handle(recorder: Recorder, clock: FakeClock) -> ClientHandle:
    return ClientHandle(factory=lambda: HubSpotCRM(make_client(recorder, clock)))


def echo_created(request: httpx.Request) -> httpx.Response:
    """Answer a create call the way HubSpot does: the supplied properties plus defaults."""
    body = json.loads(request.content)
    return httpx.Response(
        201,
        json={
            "id": "501",
            "properties": {**body["properties"], "hs_object_id": "501"},
            "createdAt": "2026-01-01T00:00:00.000Z",
            "updatedAt": "2026-01-01T00:00:00.000Z",
            "archived": False,
        },
    )
