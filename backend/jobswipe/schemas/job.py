from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


SwipeDirection = Literal["left", "right"]


class JobLocation(BaseModel):
    municipality: str | None = None
    region: str | None = None
    country: str | None = None
    city: str | None = None
    street_address: str | None = Field(default=None, alias="streetAddress")
    coordinates: list[float | None] | None = None

    class Config:
        populate_by_name = True


class Employer(BaseModel):
    name: str | None = None


class JobCard(BaseModel):
    id: str
    headline: str | None = None
    employer: Employer | None = None
    location: JobLocation | None = None
    logo_url: str | None = Field(default=None, alias="logoUrl")
    url: str | None = None
    application_deadline: str | None = Field(default=None, alias="applicationDeadline")
    published_at: str | None = Field(default=None, alias="publishedAt")
    excerpt: str | None = None
    swipe: SwipeDirection | None = None

    class Config:
        populate_by_name = True


class LikedJobCard(JobCard):
    liked_at: int | None = Field(default=None, alias="likedAt")


class SearchQueryEcho(BaseModel):
    keywords: str | None = None
    location: str | None = None
    category: str | None = None
    category_id: str | None = Field(default=None, alias="categoryId")
    region: str | None = None
    municipality: str | None = None
    country: str | None = None
    remote: str | None = None
    limit: int
    offset: int

    class Config:
        populate_by_name = True


class JobSearchResponse(BaseModel):
    source: str = "jobtech"
    cached: bool
    total: int
    count: int
    jobs: list[JobCard]
    query: SearchQueryEcho


class SwipeResponse(BaseModel):
    job: JobCard
    direction: SwipeDirection


class LikedJobsResponse(BaseModel):
    count: int
    jobs: list[LikedJobCard]


class SearchHistoryEntry(BaseModel):
    query_hash: str = Field(alias="queryHash")
    query: str
    total: int
    job_count: int = Field(alias="jobCount")
    fetched_at: int = Field(alias="fetchedAt")

    class Config:
        populate_by_name = True
