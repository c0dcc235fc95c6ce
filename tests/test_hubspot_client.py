import json

import httpx
import pytest

from hubspot_mcp.connectors.base import HubSpotAPIError
from tests.conftest import Recorder, make_client


def test_sends_bearer_token_and_json_body(clock):
    rec = Recorder(httpx.Response(201, json={"id": "7", "properties": {"email": "a@b.com"}}))
    client = make_client(rec, clock)
    out = client.post("/crm/v3/objects/contacts", {"properties": {"email": "a@b.com"}})
    assert out["id"] == "7"
    req = rec.last
    assert req.method == "POST"
    assert str(req.url) == "https://api.hubapi.com/crm/v3/objects/contacts"
    assert req.headers["Authorization"] == "Bearer test-token"
    assert req.headers["Content-Type"] == "application/json"
    assert rec.last_json() == {"properties": {"email": "a@b.com"}}


def test_unset_query_params_are_omitted(clock):
    rec = Recorder()
    client = make_client(rec, clock)
    client.get("/crm/v3/objects/contacts", {"limit": 10, "after": None})
    params = rec.last.url.params
    assert params["limit"] == "10"
    assert "after" not in params
    assert "after" not in str(rec.last.url)


def test_body_only_attached_for_mutating_methods(clock):
    rec = Recorder()
    client = make_client(rec, clock)
    client.request("GET", "/crm/v3/objects/contacts/1", body={"ignored": True})
    assert rec.last.content == b""
    client.put("/crm/v3/objects/contacts/1/associations/companies/2/contact_to_company")
    assert rec.last.content == b""


def test_no_content_yields_empty_result(clock):
    rec = Recorder(httpx.Response(204))
    client = make_client(rec, clock)
    assert client.put("/crm/v3/objects/deals/1/associations/contacts/2/deal_to_contact") == {}


def test_rate_limited_request_is_retried_once_after_retry_after(clock):
    rec = Recorder(
        httpx.Response(429, headers={"Retry-After": "2"}, text="slow down"),
        httpx.Response(200, json={"total": 0, "results": []}),
    )
    client = make_client(rec, clock)
    body = {"query": "x", "properties": ["email"], "limit": 20}
    out = client.post("/crm/v3/objects/contacts/search", body)
    assert out == {"total": 0, "results": []}
    assert len(rec.requests) == 2
    first, second = rec.requests
    assert (first.method, first.url, first.content) == (second.method, second.url, second.content)
    assert clock.sleeps == [2.0]


def test_second_rate_limit_surfaces_without_third_attempt(clock):
    rec = Recorder(
        httpx.Response(429, headers={"Retry-After": "2"}),
        httpx.Response(429, headers={"Retry-After": "2"}, text="still limited"),
        httpx.Response(200, json={}),
    )
    client = make_client(rec, clock)
    with pytest.raises(HubSpotAPIError) as ei:
        client.get("/crm/v3/objects/contacts")
    assert ei.value.status_code == 429
    assert ei.value.body == "still limited"
    assert len(rec.requests) == 2
    assert clock.sleeps == [2.0]


def test_retry_failing_with_other_status_surfaces_that_status(clock):
    rec = Recorder(
        httpx.Response(429),
        httpx.Response(404, text='{"message":"not found"}'),
    )
    client = make_client(rec, clock)
    with pytest.raises(HubSpotAPIError) as ei:
        client.get("/crm/v3/objects/deals/9")
    assert ei.value.status_code == 404
    assert str(ei.value) == 'HubSpot API error (404 Not Found): {"message":"not found"}'


@pytest.mark.parametrize("header", [None, "", "soon", "Wed, 21 Oct 2026 07:28:00 GMT"])
def test_missing_or_non_numeric_retry_after_waits_ten_seconds(clock, header):
    headers = {"Retry-After": header} if header is not None else {}
    rec = Recorder(httpx.Response(429, headers=headers), httpx.Response(200, json={"ok": True}))
    client = make_client(rec, clock)
    assert client.get("/crm/v3/pipelines/deals") == {"ok": True}
    assert clock.sleeps == [10.0]


def test_fractional_retry_after_is_honoured(clock):
    rec = Recorder(httpx.Response(429, headers={"Retry-After": "0.5"}), httpx.Response(204))
    client = make_client(rec, clock)
    client.get("/crm/v3/pipelines/deals")
    assert clock.sleeps == [0.5]


def test_other_errors_are_not_retried(clock):
    rec = Recorder(httpx.Response(500, text="boom"), httpx.Response(200, json={}))
    client = make_client(rec, clock)
    with pytest.raises(HubSpotAPIError) as ei:
        client.get("/crm/v3/objects/contacts/1")
    assert str(ei.value) == "HubSpot API error (500 Internal Server Error): boom"
    assert ei.value.reason == "Internal Server Error"
    assert len(rec.requests) == 1
    assert clock.sleeps == []


def test_malformed_json_propagates(clock):
    rec = Recorder(httpx.Response(200, content=b"<html>oops</html>"))
    client = make_client(rec, clock)
    with pytest.raises(json.JSONDecodeError):
        client.get("/crm/v3/objects/contacts/1")


def test_every_request_passes_through_the_limiter(clock):
    rec = Recorder()
    client = make_client(rec, clock)
    for _ in range(101):
        client.get("/crm/v3/objects/contacts/1")
    assert len(rec.requests) == 101
    assert clock.sleeps == [pytest.approx(10.05)]
