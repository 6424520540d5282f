from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional


# Environment variable names
ENV_BUCKET = "REMOTE_CACHE_BUCKET"
ENV_KEY = "REMOTE_CACHE_KEY"
ENV_REGION = "REMOTE_CACHE_REGION"
ENV_ENDPOINT_URL = "REMOTE_CACHE_ENDPOINT_URL"
ENV_FORMAT = "REMOTE_CACHE_FORMAT"
ENV_POLLS = "REMOTE_CACHE_POLLS"
ENV_INTERVAL = "REMOTE_CACHE_INTERVAL_SECONDS"
ENV_LOG_LEVEL = "REMOTE_CACHE_LOG_LEVEL"

FORMATS = ("text", "bytes", "json")


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.environ.get(name)
    return val if val not in (None, "") else default


@dataclass
class RemoteCacheSettings:
    """
    Where the watched object lives and how often to poll it.

    Environment variables
    - `REMOTE_CACHE_BUCKET`:   bucket holding the object (required)
    - `REMOTE_CACHE_KEY`:      object key (required)
    - `REMOTE_CACHE_REGION`:   AWS region (optional)
    - `REMOTE_CACHE_ENDPOINT_URL`: S3-compatible endpoint, e.g. MinIO (optional)
    - `REMOTE_CACHE_FORMAT`:   "text" (default), "bytes" or "json"
    - `REMOTE_CACHE_POLLS`:    number of refreshes per run (default 3)
    - `REMOTE_CACHE_INTERVAL_SECONDS`: pause between refreshes (default 10)
    - `REMOTE_CACHE_LOG_LEVEL`: logging level name (default "INFO")
    """

    bucket: str
    key: str
    region_name: Optional[str] = None
    endpoint_url: Optional[str] = field(default=None, repr=False)
    format: str = "text"
    polls: int = 3
    interval_seconds: float = 10.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.format not in FORMATS:
            raise ValueError(f"format must be one of {', '.join(FORMATS)}; got {self.format!r}")
        if self.polls <= 0:
            raise ValueError("polls must be > 0")
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        self.log_level = self.log_level.upper()
        if self.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log_level {self.log_level!r}")

    @classmethod
    def from_env(cls) -> "RemoteCacheSettings":
        bucket = _getenv(ENV_BUCKET)
        key = _getenv(ENV_KEY)
        if not bucket or not key:
            missing = [name for name, val in [(ENV_BUCKET, bucket), (ENV_KEY, key)] if not val]
            raise RuntimeError(
                f"Missing required environment variables for remote cache: {', '.join(missing)}"
            )
        try:
            polls = int(_getenv(ENV_POLLS, "3"))  # type: ignore[arg-type]
            interval = float(_getenv(ENV_INTERVAL, "10"))  # type: ignore[arg-type]
        except ValueError as ex:
            raise RuntimeError(f"Invalid numeric configuration: {ex}") from ex
        try:
            return cls(
                bucket=bucket,
                key=key,
                region_name=_getenv(ENV_REGION),
                endpoint_url=_getenv(ENV_ENDPOINT_URL),
                format=(_getenv(ENV_FORMAT, "text") or "text").lower(),
                polls=polls,
                interval_seconds=interval,
                log_level=(_getenv(ENV_LOG_LEVEL, "INFO") or "INFO").upper(),
            )
        except ValueError as ex:
            raise RuntimeError(f"Invalid remote cache configuration: {ex}") from ex


__all__ = ["RemoteCacheSettings", "FORMATS"]
