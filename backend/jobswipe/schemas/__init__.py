from jobswipe.schemas.job import (
    Employer,
    JobCard,
    JobLocation,
    JobSearchResponse,
    LikedJobCard,
    LikedJobsResponse,
    SearchHistoryEntry,
    SearchQueryEcho,
    SwipeDirection,
    SwipeResponse,
)

__all__ = [
    "Employer",
    "JobCard",
    "JobLocation",
    "JobSearchResponse",
    "LikedJobCard",
    "LikedJobsResponse",
    "SearchHistoryEntry",
    "SearchQueryEcho",
    "SwipeDirection",
    "SwipeResponse",
]
