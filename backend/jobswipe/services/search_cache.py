from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Mapping
from urllib.parse import urlencode

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.orm import Session

from jobswipe.models.search_cache import SearchCache


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanonicalQuery:
    text: str
    hash: str


@dataclass(frozen=True)
class CachedSearch:
    job_ids: list[str]
    total: int
    fetched_at: int


def canonicalize(params: Mapping[str, str]) -> CanonicalQuery:
    """Serialize query params in key order and hash them into a cache key."""
    text = urlencode(sorted((str(key), str(value)) for key, value in params.items()))
    return CanonicalQuery(text=text, hash=hashlib.sha256(text.encode("utf-8")).hexdigest())


class SearchCacheService:
    def __init__(self, ttl_ms: int = 300_000) -> None:
        self.ttl_ms = max(0, ttl_ms)

    def is_fresh(self, fetched_at: int, now: int) -> bool:
        return now - fetched_at <= self.ttl_ms

    def get(self, db: Session, query_hash: str, now: int) -> CachedSearch | None:
        row = db.execute(
            select(SearchCache.job_ids, SearchCache.total, SearchCache.fetched_at).where(
                SearchCache.query_hash == query_hash
            )
        ).first()
        if row is None:
            return None
        if not self.is_fresh(row.fetched_at, now):
            logger.debug("Search cache entry is stale", extra={"query_hash": query_hash})
            return None
        return CachedSearch(job_ids=list(row.job_ids or []), total=row.total, fetched_at=row.fetched_at)

    def set(
        self,
        db: Session,
        query_hash: str,
        query: str,
        job_ids: list[str],
        total: int,
        fetched_at: int,
        commit: bool = True,
    ) -> None:
        stmt = insert(SearchCache).values(
            query_hash=query_hash,
            query=query,
            job_ids=list(job_ids),
            total=total,
            fetched_at=fetched_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[SearchCache.query_hash],
            set_={
                "query": stmt.excluded["query"],
                "job_ids": stmt.excluded["job_ids"],
                "total": stmt.excluded["total"],
                "fetched_at": stmt.excluded["fetched_at"],
            },
        )
        db.execute(stmt)
        if commit:
            db.commit()

    def history(self, db: Session, limit: int = 50) -> list[SearchCache]:
        return list(
            db.execute(select(SearchCache).order_by(SearchCache.fetched_at.desc()).limit(limit)).scalars()
        )

    def clear(self, db: Session) -> int:
        result = db.execute(delete(SearchCache))
        db.commit()
        logger.info("Cleared search cache", extra={"removed": result.rowcount})
        return int(result.rowcount or 0)
