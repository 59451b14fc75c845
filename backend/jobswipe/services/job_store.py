from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Mapping

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.orm import Session

from jobswipe.models.job import Job
from jobswipe.models.swipe import Swipe
from jobswipe.services.jobtech import compose_location


logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def _job_row(job: Mapping[str, Any], fetched_at: int) -> dict[str, Any]:
    employer = job.get("employer") or {}
    return {
        "id": str(job["id"]),
        "headline": job.get("headline"),
        "employer_name": employer.get("name"),
        "location": compose_location(job),
        "logo_url": job.get("logo_url"),
        "webpage_url": job.get("webpage_url"),
        "published_at": job.get("publication_date"),
        "data_json": dict(job),
        "fetched_at": fetched_at,
    }


def save_jobs(
    db: Session,
    jobs: Iterable[Mapping[str, Any]],
    fetched_at: int | None = None,
    commit: bool = True,
) -> int:
    """Upsert upstream job ads keyed by id.

    The whole batch is one transaction: if any row fails nothing is kept.
    With ``commit=False`` the caller owns the transaction.
    """
    fetched_at = now_ms() if fetched_at is None else fetched_at
    rows = [_job_row(job, fetched_at) for job in jobs]
    try:
        for row in rows:
            stmt = insert(Job).values(**row)
            stmt = stmt.on_conflict_do_update(
                index_elements=[Job.id],
                set_={key: stmt.excluded[key] for key in row if key != "id"},
            )
            db.execute(stmt)
        if commit:
            db.commit()
    except Exception:
        db.rollback()
        raise
    logger.debug("Upserted jobs", extra={"count": len(rows)})
    return len(rows)


def get_job_by_id(db: Session, job_id: str) -> dict[str, Any] | None:
    return db.execute(select(Job.data_json).where(Job.id == job_id)).scalar_one_or_none()


def get_jobs_by_ids(db: Session, job_ids: list[str]) -> list[dict[str, Any]]:
    if not job_ids:
        return []
    rows = db.execute(select(Job.id, Job.data_json).where(Job.id.in_(job_ids))).all()
    by_id = {row.id: row.data_json for row in rows}
    return [by_id[job_id] for job_id in job_ids if job_id in by_id]


def get_swipe_map(db: Session, job_ids: list[str]) -> dict[str, str]:
    if not job_ids:
        return {}
    rows = db.execute(select(Swipe.job_id, Swipe.direction).where(Swipe.job_id.in_(job_ids))).all()
    return {row.job_id: row.direction for row in rows}


def save_swipe(
    db: Session,
    job_id: str,
    direction: str,
    swiped_at: int | None = None,
    commit: bool = True,
) -> None:
    swiped_at = now_ms() if swiped_at is None else swiped_at
    stmt = insert(Swipe).values(job_id=job_id, direction=direction, swiped_at=swiped_at)
    stmt = stmt.on_conflict_do_update(
        index_elements=[Swipe.job_id],
        set_={"direction": stmt.excluded.direction, "swiped_at": stmt.excluded.swiped_at},
    )
    try:
        db.execute(stmt)
        if commit:
            db.commit()
    except Exception:
        db.rollback()
        raise


def get_liked_jobs(db: Session) -> list[tuple[dict[str, Any], int]]:
    rows = db.execute(
        select(Job.data_json, Swipe.swiped_at)
        .join(Swipe, Swipe.job_id == Job.id)
        .where(Swipe.direction == "right")
        .order_by(Swipe.swiped_at.desc())
    ).all()
    return [(row.data_json, row.swiped_at) for row in rows]
