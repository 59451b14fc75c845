import asyncio

import httpx
import pytest

from jobswipe.errors import JobNotFoundError, UpstreamError
from jobswipe.services.jobtech import JobtechClient, build_excerpt, compose_location, to_job_card

from conftest import make_ad


def test_build_excerpt_collapses_whitespace():
    assert build_excerpt("  Build   things\n\nwith\tPython.  ") == "Build things with Python."
    assert build_excerpt("") is None
    assert build_excerpt(None) is None


def test_build_excerpt_truncates_long_text_with_ellipsis():
    text = "word " * 100
    excerpt = build_excerpt(text)

    assert len(excerpt) == 280
    assert excerpt.endswith("...")
    assert build_excerpt("x" * 280) == "x" * 280


def test_compose_location_skips_missing_parts():
    assert compose_location({"workplace_address": {"municipality": "Malmö", "country": "Sverige"}}) == "Malmö, Sverige"
    assert compose_location({"workplace_address": None}) is None


def test_to_job_card_projects_upstream_fields():
    card = to_job_card(make_ad("abc"), "right")
    payload = card.model_dump(by_alias=True)

    assert payload["id"] == "abc"
    assert payload["employer"] == {"name": "Example AB"}
    assert payload["location"]["streetAddress"] == "Drottninggatan 1"
    assert payload["location"]["coordinates"] == [18.06, 59.33]
    assert payload["logoUrl"] == "https://example.se/logo/abc.png"
    assert payload["url"] == "https://arbetsformedlingen.se/ad/abc"
    assert payload["applicationDeadline"] == "2026-11-30T23:59:59"
    assert payload["publishedAt"] == "2026-10-01T08:00:00"
    assert payload["excerpt"] == "Build things with Python."
    assert payload["swipe"] == "right"


def test_to_job_card_handles_sparse_ads():
    card = to_job_card({"id": "bare"})

    assert card.employer is None
    assert card.location is None
    assert card.excerpt is None
    assert card.swipe is None


def _client(handler) -> JobtechClient:
    return JobtechClient("https://jobsearch.test", api_key="secret", transport=httpx.MockTransport(handler))


def test_client_sends_api_key_and_query_params():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"total": {"value": 0}, "hits": []})

    async def run():
        client = _client(handler)
        try:
            return await client.search({"q": "developer", "limit": "25"})
        finally:
            await client.aclose()

    data = asyncio.run(run())

    assert data["hits"] == []
    assert seen[0].headers["X-API-Key"] == "secret"
    assert seen[0].headers["accept"] == "application/json"
    assert seen[0].url.params["q"] == "developer"
    assert seen[0].url.params["limit"] == "25"


@pytest.mark.parametrize(
    ("status", "expected"),
    [(404, JobNotFoundError), (500, UpstreamError), (503, UpstreamError)],
)
def test_get_ad_maps_error_statuses(status, expected):
    async def run():
        client = _client(lambda request: httpx.Response(status, text="nope"))
        try:
            await client.get_ad("abc")
        finally:
            await client.aclose()

    with pytest.raises(expected) as excinfo:
        asyncio.run(run())
    if expected is UpstreamError:
        assert excinfo.value.upstream_status == status


def test_transport_failure_is_an_upstream_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        client = _client(handler)
        try:
            await client.search({"limit": "20"})
        finally:
            await client.aclose()

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(run())
    assert excinfo.value.upstream_status is None


def test_search_404_is_not_a_missing_job():
    async def run():
        client = _client(lambda request: httpx.Response(404, text="no such route"))
        try:
            await client.search({"limit": "20"})
        finally:
            await client.aclose()

    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(run())
    assert not isinstance(excinfo.value, JobNotFoundError)
