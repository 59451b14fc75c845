from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from jobswipe.config import Settings
from jobswipe.database import Database
from jobswipe.services.jobtech import JobtechClient


def make_ad(job_id: str, **overrides: Any) -> dict[str, Any]:
    ad = {
        "id": job_id,
        "headline": f"Developer {job_id}",
        "employer": {"name": "Example AB"},
        "workplace_address": {
            "municipality": "Stockholm",
            "region": "Stockholms län",
            "country": "Sverige",
            "city": "Stockholm",
            "street_address": "Drottninggatan 1",
            "coordinates": [18.06, 59.33],
        },
        "logo_url": f"https://example.se/logo/{job_id}.png",
        "webpage_url": f"https://arbetsformedlingen.se/ad/{job_id}",
        "application_deadline": "2026-11-30T23:59:59",
        "publication_date": "2026-10-01T08:00:00",
        "description": {"text": "Build   things\nwith Python."},
    }
    ad.update(overrides)
    return ad


class FakeClock:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeJobtech:
    """In-process stand-in for the JobSearch API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.hits: list[dict[str, Any]] = []
        self.total: int | None = None
        self.ads: dict[str, dict[str, Any]] = {}
        self.search_status = 200
        self.ad_status: int | None = None
        self.requests: list[httpx.Request] = []

    @property
    def search_calls(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == "/search"]

    @property
    def ad_calls(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path.startswith("/ad/")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/search":
            if self.search_status != 200:
                return httpx.Response(self.search_status, text="upstream broke")
            body: dict[str, Any] = {"hits": self.hits}
            if self.total is not None:
                body["total"] = {"value": self.total}
            return httpx.Response(200, json=body)
        if request.url.path.startswith("/ad/"):
            if self.ad_status is not None:
                return httpx.Response(self.ad_status, text="ad lookup failed")
            job_id = request.url.path[len("/ad/"):]
            if job_id not in self.ads:
                return httpx.Response(404, text="not found")
            return httpx.Response(200, json=self.ads[job_id])
        return httpx.Response(404)

    def client(self) -> JobtechClient:
        return JobtechClient("https://jobsearch.test", transport=httpx.MockTransport(self.handler))


@pytest.fixture()
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'job-cache.sqlite'}")
    db.open()
    yield db
    db.close()


@pytest.fixture()
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def upstream():
    return FakeJobtech()


@pytest.fixture()
def jobtech_client(upstream):
    client = upstream.client()
    yield client
    asyncio.run(client.aclose())


@pytest.fixture()
def test_settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'api' / 'job-cache.sqlite'}",
        cache_ttl_seconds=300,
        log_level="WARNING",
    )
