from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote


def _is_serverless() -> bool:
    return os.getenv("VERCEL") == "1" or bool(os.getenv("AWS_LAMBDA_FUNCTION_NAME"))


def _default_database_url() -> str:
    # Only /tmp is writable on serverless hosts.
    if _is_serverless():
        return "sqlite:////tmp/job-cache.sqlite"
    return "sqlite:///./data/job-cache.sqlite"


def _csv_env(name: str, default: str) -> list[str]:
    return [part.strip() for part in os.getenv(name, default).split(",") if part.strip()]


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass
class Settings:
    app_name: str = "Job Swipe"
    environment: str = field(default_factory=lambda: os.getenv("ENV", "development"))
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", _default_database_url()))
    sqlite_busy_timeout_ms: int = field(default_factory=lambda: _int_env("SQLITE_BUSY_TIMEOUT_MS", 5000))
    jobtech_base_url: str = field(
        default_factory=lambda: os.getenv("JOBTECH_BASE_URL", "https://jobsearch.api.jobtechdev.se")
    )
    jobtech_api_key: str = field(default_factory=lambda: os.getenv("JOBTECH_API_KEY", ""))
    jobtech_api_key_header: str = field(default_factory=lambda: os.getenv("JOBTECH_API_KEY_HEADER", "X-API-Key"))
    upstream_timeout_seconds: float = field(default_factory=lambda: _float_env("UPSTREAM_TIMEOUT_SECONDS", 15.0))
    cache_ttl_seconds: int = field(default_factory=lambda: _int_env("JOB_CACHE_TTL_SECONDS", 300))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    cors_origins: list[str] = field(
        default_factory=lambda: _csv_env(
            "CORS_ORIGINS",
            "http://localhost,http://localhost:3000,http://localhost:8000,http://127.0.0.1:8000",
        )
    )

    @property
    def cache_ttl_ms(self) -> int:
        return max(0, self.cache_ttl_seconds) * 1000

    def ensure_directories(self) -> None:
        self._ensure_sqlite_directory()

    def _ensure_sqlite_directory(self) -> None:
        if not self.database_url.startswith("sqlite:///"):
            return
        raw_path = self.database_url.replace("sqlite:///", "", 1)
        if not raw_path or raw_path == ":memory:":
            return
        db_path = Path(unquote(raw_path))
        if not db_path.is_absolute():
            db_path = Path(".") / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
