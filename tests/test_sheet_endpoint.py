import json

import httpx
import pytest

from conftest import SHEET_URL, make_vote
from services.sheets.endpoint import SheetEndpoint


def _endpoint(endpoint_settings, handler, url=SHEET_URL):
    if url:
        endpoint_settings.set_url(url)
    return SheetEndpoint(endpoint_settings, transport=httpx.MockTransport(handler))


def test_is_configured_tracks_settings(endpoint_settings):
    endpoint = SheetEndpoint(endpoint_settings)
    assert not endpoint.is_configured()

    endpoint_settings.set_url("   ")
    assert not endpoint.is_configured()

    endpoint_settings.set_url(SHEET_URL)
    assert endpoint.is_configured()

    endpoint_settings.clear()
    assert not endpoint.is_configured()


@pytest.mark.asyncio
async def test_fetch_all_decodes_vote_array(endpoint_settings):
    rows = [
        {"id": "a", "candidateId": "cand_1", "region": "norte", "timestamp": 1},
        {"id": "b", "candidateId": "cand_2", "region": "sur", "timestamp": 2},
    ]
    endpoint = _endpoint(endpoint_settings, lambda request: httpx.Response(200, json=rows))

    votes = await endpoint.fetch_all()

    assert [v.id for v in votes] == ["a", "b"]
    assert votes[1].candidate_id == "cand_2"


@pytest.mark.asyncio
async def test_fetch_all_empty_array_is_empty_list_not_failure(endpoint_settings):
    endpoint = _endpoint(endpoint_settings, lambda request: httpx.Response(200, json=[]))

    assert await endpoint.fetch_all() == []


@pytest.mark.asyncio
async def test_fetch_all_sends_cache_busting_read(endpoint_settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    endpoint = _endpoint(endpoint_settings, handler)
    await endpoint.fetch_all()
    await endpoint.fetch_all()

    assert all(r.method == "GET" for r in seen)
    assert all(r.headers["cache-control"] == "no-cache" for r in seen)
    stamps = [r.url.params["t"] for r in seen]
    assert all(stamp.isdigit() for stamp in stamps)
    assert str(seen[0].url).startswith(SHEET_URL + "?t=")


@pytest.mark.asyncio
async def test_fetch_all_follows_script_redirect(endpoint_settings):
    echo_url = "https://script.googleusercontent.com/macros/echo?lib=x"

    def handler(request):
        if request.url.host == "script.google.com":
            return httpx.Response(302, headers={"Location": echo_url})
        return httpx.Response(200, json=[{"id": "a", "candidateId": "cand_1"}])

    endpoint = _endpoint(endpoint_settings, handler)

    votes = await endpoint.fetch_all()
    assert [v.id for v in votes] == ["a"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"error": "not an array"}),
        httpx.Response(200, text="<html>Sign in</html>"),
        httpx.Response(500, json=[]),
        httpx.Response(404, text="not found"),
    ],
)
async def test_fetch_all_failures_return_none(endpoint_settings, response):
    endpoint = _endpoint(endpoint_settings, lambda request: response)

    assert await endpoint.fetch_all() is None


@pytest.mark.asyncio
async def test_fetch_all_transport_error_returns_none(endpoint_settings):
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    endpoint = _endpoint(endpoint_settings, handler)

    assert await endpoint.fetch_all() is None


@pytest.mark.asyncio
async def test_fetch_all_without_url_makes_no_request(endpoint_settings):
    calls = []
    endpoint = _endpoint(endpoint_settings, lambda r: calls.append(r), url=None)

    assert await endpoint.fetch_all() is None
    assert calls == []


@pytest.mark.asyncio
async def test_fetch_all_skips_malformed_rows(endpoint_settings):
    rows = [
        {"id": "a", "candidateId": "cand_1", "region": "norte", "timestamp": 1},
        {"id": "", "candidateId": "", "region": "", "timestamp": ""},
        "header",
    ]
    endpoint = _endpoint(endpoint_settings, lambda request: httpx.Response(200, json=rows))

    votes = await endpoint.fetch_all()
    assert [v.id for v in votes] == ["a"]


@pytest.mark.asyncio
@pytest.mark.parametrize("cell", ['"1e999"', "NaN", "Infinity", "-Infinity", '"nan"'])
async def test_fetch_all_tolerates_non_finite_timestamp_cells(endpoint_settings, cell):
    body = '[{"id": "a", "candidateId": "cand_1", "region": "norte", "timestamp": %s}]' % cell
    endpoint = _endpoint(
        endpoint_settings,
        lambda request: httpx.Response(
            200, content=body.encode(), headers={"Content-Type": "application/json"}
        ),
    )

    votes = await endpoint.fetch_all()
    assert votes == [make_vote("a", ts=0)]


@pytest.mark.asyncio
async def test_append_posts_plain_text_json(endpoint_settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(302, headers={"Location": "https://example.invalid/"})

    endpoint = _endpoint(endpoint_settings, handler)
    vote = make_vote("v1", candidate_id="cand_2", region="este", ts=123)

    assert await endpoint.append(vote) is None

    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == SHEET_URL
    assert request.headers["content-type"] == "text/plain;charset=utf-8"
    assert json.loads(request.content) == {
        "id": "v1",
        "candidateId": "cand_2",
        "region": "este",
        "timestamp": 123,
    }


@pytest.mark.asyncio
async def test_append_swallows_network_errors(endpoint_settings):
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    endpoint = _endpoint(endpoint_settings, handler)

    await endpoint.append(make_vote("v1"))


@pytest.mark.asyncio
async def test_append_ignores_error_status(endpoint_settings):
    endpoint = _endpoint(endpoint_settings, lambda request: httpx.Response(500))

    await endpoint.append(make_vote("v1"))
