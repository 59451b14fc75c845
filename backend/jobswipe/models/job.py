from __future__ import annotations

from sqlalchemy import BigInteger, Column, String, Text
from sqlalchemy.types import JSON

from jobswipe.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(255), primary_key=True)
    headline = Column(Text)
    employer_name = Column(String(500))
    location = Column(String(500))
    logo_url = Column(String(1000))
    webpage_url = Column(String(1000))
    published_at = Column(String(64))
    data_json = Column(JSON, nullable=False)
    fetched_at = Column(BigInteger, nullable=False)
