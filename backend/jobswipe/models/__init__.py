from jobswipe.models.job import Job
from jobswipe.models.search_cache import SearchCache
from jobswipe.models.swipe import SWIPE_DIRECTIONS, Swipe

__all__ = ["Job", "SearchCache", "Swipe", "SWIPE_DIRECTIONS"]
