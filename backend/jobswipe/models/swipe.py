from __future__ import annotations

from sqlalchemy import BigInteger, CheckConstraint, Column, Index, String

from jobswipe.database import Base


SWIPE_DIRECTIONS = ("left", "right")


class Swipe(Base):
    __tablename__ = "swipes"
    __table_args__ = (
        CheckConstraint("direction IN ('left', 'right')", name="ck_swipe_direction"),
        Index("idx_direction_swiped_at", "direction", "swiped_at"),
    )

    job_id = Column(String(255), primary_key=True)
    direction = Column(String(5), nullable=False)
    swiped_at = Column(BigInteger, nullable=False)
