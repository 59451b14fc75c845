from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobswipe.api import jobs
from jobswipe.api.errors import register_error_handlers
from jobswipe.config import Settings, settings as default_settings
from jobswipe.database import Database
from jobswipe.logging_config import configure_logging
from jobswipe.services.job_search import JobSearchService
from jobswipe.services.job_store import now_ms
from jobswipe.services.jobtech import JobtechClient
from jobswipe.services.search_cache import SearchCacheService
from jobswipe.services.swipes import SwipeService


def create_app(
    settings: Settings | None = None,
    client: JobtechClient | None = None,
    clock: Callable[[], int] = now_ms,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings.ensure_directories()
        database = Database(settings.database_url, busy_timeout_ms=settings.sqlite_busy_timeout_ms)
        database.open()
        upstream = client or JobtechClient(
            settings.jobtech_base_url,
            api_key=settings.jobtech_api_key,
            api_key_header=settings.jobtech_api_key_header,
            timeout=settings.upstream_timeout_seconds,
        )
        cache_service = SearchCacheService(ttl_ms=settings.cache_ttl_ms)

        app.state.database = database
        app.state.cache_service = cache_service
        app.state.search_service = JobSearchService(upstream, cache_service, clock=clock)
        app.state.swipe_service = SwipeService(upstream, clock=clock)
        try:
            yield
        finally:
            await upstream.aclose()
            database.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("jobswipe.main:app", host="0.0.0.0", port=8000)
