from __future__ import annotations

import re

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from jobswipe.database import get_db
from jobswipe.errors import InvalidDirectionError
from jobswipe.schemas.job import (
    JobSearchResponse,
    LikedJobsResponse,
    SearchHistoryEntry,
    SearchQueryEcho,
    SwipeResponse,
)
from jobswipe.services.job_search import DEFAULT_LIMIT, JobSearchService, SearchFilters
from jobswipe.services.search_cache import SearchCacheService
from jobswipe.services.swipes import SwipeService


router = APIRouter()


def get_search_service(request: Request) -> JobSearchService:
    return request.app.state.search_service


def get_swipe_service(request: Request) -> SwipeService:
    return request.app.state.swipe_service


def get_cache_service(request: Request) -> SearchCacheService:
    return request.app.state.cache_service


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _to_int(value: str | None, fallback: int) -> int:
    # "25abc" -> 25, "2.9" -> 2
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else fallback


@router.get("", response_model=JobSearchResponse)
async def search_jobs(
    q: str | None = Query(default=None),
    keywords: str | None = Query(default=None),
    location: str | None = Query(default=None),
    category: str | None = Query(default=None),
    category_id: str | None = Query(default=None, alias="categoryId"),
    occupation_field: str | None = Query(default=None, alias="occupationField"),
    region: str | None = Query(default=None),
    municipality: str | None = Query(default=None),
    country: str | None = Query(default=None),
    remote: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    offset: str | None = Query(default=None),
    resdet: str | None = Query(default=None),
    db: Session = Depends(get_db),
    service: JobSearchService = Depends(get_search_service),
) -> JobSearchResponse:
    filters = SearchFilters(
        keywords=q if q is not None else keywords,
        location=location,
        category=category,
        category_id=category_id if category_id is not None else occupation_field,
        region=region,
        municipality=municipality,
        country=country,
        remote=remote,
        limit=_to_int(limit, DEFAULT_LIMIT),
        offset=_to_int(offset, 0),
        resdet=resdet,
    )
    result = await service.search(db, filters)

    return JobSearchResponse(
        cached=result.cached,
        total=result.total,
        count=len(result.jobs),
        jobs=result.jobs,
        query=SearchQueryEcho(
            keywords=filters.keywords,
            location=filters.location,
            category=filters.category,
            category_id=filters.category_id,
            region=filters.region,
            municipality=filters.municipality,
            country=filters.country,
            remote=filters.remote,
            limit=filters.limit,
            offset=filters.offset,
        ),
    )


@router.get("/liked", response_model=LikedJobsResponse)
def liked_jobs(
    db: Session = Depends(get_db),
    service: SwipeService = Depends(get_swipe_service),
) -> LikedJobsResponse:
    cards = service.liked(db)
    return LikedJobsResponse(count=len(cards), jobs=cards)


@router.get("/search-history", response_model=list[SearchHistoryEntry])
def search_history(
    limit: int = Query(default=50, ge=1, le=500),
    db: Session = Depends(get_db),
    cache: SearchCacheService = Depends(get_cache_service),
) -> list[SearchHistoryEntry]:
    return [
        SearchHistoryEntry(
            query_hash=row.query_hash,
            query=row.query,
            total=row.total,
            job_count=len(row.job_ids or []),
            fetched_at=row.fetched_at,
        )
        for row in cache.history(db, limit=limit)
    ]


@router.delete("/cache")
def clear_search_cache(
    db: Session = Depends(get_db),
    cache: SearchCacheService = Depends(get_cache_service),
) -> dict[str, int | str]:
    removed = cache.clear(db)
    return {"status": "cleared", "removed_cache_entries": removed}


@router.post("/{job_id}/swipe", response_model=SwipeResponse)
async def swipe_job(
    job_id: str,
    request: Request,
    db: Session = Depends(get_db),
    service: SwipeService = Depends(get_swipe_service),
) -> SwipeResponse:
    try:
        body = await request.json()
    except ValueError:
        raise InvalidDirectionError() from None
    direction = body.get("direction") if isinstance(body, dict) else None

    card, recorded = await service.record(db, job_id, direction)
    return SwipeResponse(job=card, direction=recorded)
