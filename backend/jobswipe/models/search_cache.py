from __future__ import annotations

from sqlalchemy import BigInteger, Column, Index, Integer, String, Text
from sqlalchemy.types import JSON

from jobswipe.database import Base


class SearchCache(Base):
    __tablename__ = "search_cache"
    __table_args__ = (
        Index("idx_fetched_at", "fetched_at"),
    )

    query_hash = Column(String(64), primary_key=True)
    query = Column(Text, nullable=False)
    job_ids = Column(JSON, nullable=False)
    total = Column(Integer, nullable=False)
    fetched_at = Column(BigInteger, nullable=False)
