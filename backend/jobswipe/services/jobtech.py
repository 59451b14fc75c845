from __future__ import annotations

import logging
import re
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from jobswipe.errors import JobNotFoundError, UpstreamError
from jobswipe.schemas.job import Employer, JobCard, JobLocation


logger = logging.getLogger(__name__)

EXCERPT_MAX_LENGTH = 280


class JobtechClient:
    """Thin async client for the JobTech JobSearch API."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        api_key_header: str = "X-API-Key",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"accept": "application/json"}
        if api_key:
            headers[api_key_header] = api_key
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def search(self, params: Mapping[str, str]) -> dict[str, Any]:
        return await self._get_json("/search", params=dict(params))

    async def get_ad(self, job_id: str) -> dict[str, Any]:
        try:
            return await self._get_json(f"/ad/{quote(job_id, safe='')}")
        except UpstreamError as exc:
            if exc.upstream_status == 404:
                raise JobNotFoundError(job_id) from exc
            raise

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("JobSearch request failed", extra={"path": path, "error": str(exc)})
            raise UpstreamError(f"JobSearch API unreachable: {exc}") from exc

        if response.status_code >= 400:
            message = response.text or "unknown error"
            logger.warning(
                "JobSearch returned an error",
                extra={"path": path, "status_code": response.status_code},
            )
            raise UpstreamError(
                f"JobSearch API error {response.status_code}: {message}",
                upstream_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("JobSearch API returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise UpstreamError("JobSearch API returned an unexpected payload")
        return payload


def build_excerpt(text: str | None) -> str | None:
    if not text:
        return None
    normalized = re.sub(r"\s+", " ", text).strip()
    if len(normalized) <= EXCERPT_MAX_LENGTH:
        return normalized
    return f"{normalized[:EXCERPT_MAX_LENGTH - 3]}..."


def compose_location(job: Mapping[str, Any]) -> str | None:
    address = job.get("workplace_address") or {}
    parts = [address.get(key) for key in ("city", "municipality", "region", "country")]
    joined = ", ".join(str(part) for part in parts if part)
    return joined or None


def to_job_card(job: Mapping[str, Any], swipe: str | None = None) -> JobCard:
    address = job.get("workplace_address")
    employer = job.get("employer")
    description = job.get("description") or {}

    location = None
    if address:
        location = JobLocation(
            municipality=address.get("municipality"),
            region=address.get("region"),
            country=address.get("country"),
            city=address.get("city"),
            street_address=address.get("street_address"),
            coordinates=address.get("coordinates"),
        )

    return JobCard(
        id=str(job["id"]),
        headline=job.get("headline"),
        employer=Employer(name=employer.get("name")) if employer else None,
        location=location,
        logo_url=job.get("logo_url"),
        url=job.get("webpage_url"),
        application_deadline=job.get("application_deadline"),
        published_at=job.get("publication_date"),
        excerpt=build_excerpt(description.get("text")),
        swipe=swipe,
    )
