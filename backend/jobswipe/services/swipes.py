from __future__ import annotations

import logging
from typing import Any, Callable

from sqlalchemy.orm import Session

from jobswipe.errors import InvalidDirectionError
from jobswipe.models.swipe import SWIPE_DIRECTIONS
from jobswipe.schemas.job import JobCard, LikedJobCard
from jobswipe.services import job_store
from jobswipe.services.jobtech import JobtechClient, to_job_card


logger = logging.getLogger(__name__)


def parse_direction(value: Any) -> str:
    if isinstance(value, str) and value in SWIPE_DIRECTIONS:
        return value
    raise InvalidDirectionError()


class SwipeService:
    def __init__(self, client: JobtechClient, clock: Callable[[], int] = job_store.now_ms) -> None:
        self.client = client
        self.clock = clock

    async def record(self, db: Session, job_id: str, direction: Any) -> tuple[JobCard, str]:
        """Store a left/right decision, fetching the job first if it is unknown locally."""
        direction = parse_direction(direction)

        job = job_store.get_job_by_id(db, job_id)
        fetched = None
        if job is None:
            fetched = await self.client.get_ad(job_id)
            job = {**fetched, "id": job_id}

        # The fetched job and the swipe land in one transaction.
        try:
            if fetched is not None:
                job_store.save_jobs(db, [job], fetched_at=self.clock(), commit=False)
            job_store.save_swipe(db, job_id, direction, swiped_at=self.clock(), commit=False)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Recorded swipe", extra={"job_id": job_id, "direction": direction})
        return to_job_card(job, direction), direction

    def liked(self, db: Session) -> list[LikedJobCard]:
        cards: list[LikedJobCard] = []
        for job, swiped_at in job_store.get_liked_jobs(db):
            card = to_job_card(job, "right")
            cards.append(LikedJobCard(**card.model_dump(), liked_at=swiped_at))
        return cards
