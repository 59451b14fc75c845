from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from sqlalchemy.orm import Session

from jobswipe.schemas.job import JobCard
from jobswipe.services import job_store
from jobswipe.services.jobtech import JobtechClient, to_job_card
from jobswipe.services.search_cache import SearchCacheService, canonicalize


logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def clamp_limit(value: int | None) -> int:
    if value is None or value <= 0:
        return DEFAULT_LIMIT
    return min(int(value), MAX_LIMIT)


def clamp_offset(value: int | None) -> int:
    return max(0, int(value or 0))


@dataclass
class SearchFilters:
    keywords: str | None = None
    location: str | None = None
    category: str | None = None
    category_id: str | None = None
    region: str | None = None
    municipality: str | None = None
    country: str | None = None
    remote: str | None = None
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    resdet: str | None = None

    def __post_init__(self) -> None:
        self.limit = clamp_limit(self.limit)
        self.offset = clamp_offset(self.offset)


@dataclass
class SearchResult:
    cached: bool
    total: int
    jobs: list[JobCard] = field(default_factory=list)
    query_hash: str = ""


def build_upstream_params(filters: SearchFilters) -> dict[str, str]:
    params: dict[str, str] = {}
    query_parts = [part for part in (filters.keywords, filters.location, filters.category) if part]
    if query_parts:
        params["q"] = " ".join(query_parts)
    if filters.category_id:
        params["occupation-field"] = filters.category_id
    if filters.region:
        params["region"] = filters.region
    if filters.municipality:
        params["municipality"] = filters.municipality
    if filters.country:
        params["country"] = filters.country
    if filters.remote:
        params["remote"] = filters.remote
    params["limit"] = str(filters.limit)
    if filters.offset > 0:
        params["offset"] = str(filters.offset)
    params["resdet"] = filters.resdet or "full"
    return params


def _annotate(db: Session, jobs: list[dict[str, Any]]) -> list[JobCard]:
    swipe_map = job_store.get_swipe_map(db, [str(job["id"]) for job in jobs])
    return [to_job_card(job, swipe_map.get(str(job["id"]))) for job in jobs]


class JobSearchService:
    """Cache-aside search over the JobSearch API."""

    def __init__(
        self,
        client: JobtechClient,
        cache: SearchCacheService,
        clock: Callable[[], int] = job_store.now_ms,
    ) -> None:
        self.client = client
        self.cache = cache
        self.clock = clock

    async def search(self, db: Session, filters: SearchFilters) -> SearchResult:
        params = build_upstream_params(filters)
        canonical = canonicalize(params)

        entry = self.cache.get(db, canonical.hash, now=self.clock())
        if entry is not None:
            jobs = job_store.get_jobs_by_ids(db, entry.job_ids)
            if len(jobs) == len(entry.job_ids):
                logger.info("Search cache hit", extra={"query_hash": canonical.hash, "count": len(jobs)})
                return SearchResult(
                    cached=True,
                    total=entry.total,
                    jobs=_annotate(db, jobs),
                    query_hash=canonical.hash,
                )
            reason = "incomplete"
        else:
            reason = "absent_or_stale"
        logger.info("Search cache miss", extra={"query_hash": canonical.hash, "reason": reason})

        # Upstream failures propagate before anything is written.
        data = await self.client.search(params)
        hits = [hit for hit in (data.get("hits") or []) if hit.get("id") is not None]
        total_block = data.get("total") or {}
        total = total_block.get("value") if isinstance(total_block, dict) else None
        if total is None:
            total = len(hits)
        fetched_at = self.clock()

        try:
            job_store.save_jobs(db, hits, fetched_at=fetched_at, commit=False)
            self.cache.set(
                db,
                canonical.hash,
                canonical.text,
                [str(hit["id"]) for hit in hits],
                int(total),
                fetched_at,
                commit=False,
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        return SearchResult(
            cached=False,
            total=int(total),
            jobs=_annotate(db, hits),
            query_hash=canonical.hash,
        )
