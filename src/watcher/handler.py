from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from remote_cache.config import RemoteCacheSettings
from remote_cache.decoders import BytesDecoder, Decoder, JsonDecoder, TextDecoder
from remote_cache.errors import FetchError
from remote_cache.handle import VersionedHandle, create_unfetched
from remote_cache.s3_transport import S3Transport
from remote_cache.transport import Transport


logger = logging.getLogger(__name__)

UPDATED = "updated"
UNCHANGED = "unchanged"
ERROR = "error"


def _decoder_for(fmt: str) -> Decoder[Any]:
    if fmt == "bytes":
        return BytesDecoder()
    if fmt == "json":
        return JsonDecoder(Any)
    return TextDecoder()


def watch(
    handle: VersionedHandle[Any],
    transport: Transport,
    *,
    polls: int,
    interval: float,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[VersionedHandle[Any], List[str]]:
    """
    Refresh `handle` `polls` times, pausing `interval` seconds between polls.

    - A changed object replaces the held handle.
    - "Not modified" and any `FetchError` keep the held handle; errors are
      logged, not raised, so one bad poll does not end the run.

    Returns the last good handle and one outcome per poll
    ("updated" | "unchanged" | "error").
    """
    outcomes: List[str] = []
    for n in range(1, polls + 1):
        bucket, key = handle.identity()
        logger.info("%dx - refreshing %s/%s", n, bucket, key)
        try:
            new = handle.refresh(transport)
        except FetchError as e:
            logger.error("Refresh of %s/%s failed: %s", bucket, key, e)
            outcomes.append(ERROR)
        else:
            if new is None:
                logger.info("No modification for %s/%s", bucket, key)
                outcomes.append(UNCHANGED)
            else:
                handle = new
                logger.info(
                    "Updated %s/%s to token %s",
                    bucket,
                    key,
                    new.content.validation_token,
                )
                outcomes.append(UPDATED)
        if n < polls and interval > 0:
            sleep(interval)
    return handle, outcomes


def _summarize(handle: VersionedHandle[Any], outcomes: List[str]) -> Dict[str, Any]:
    bucket, key = handle.identity()
    content = handle.content
    return {
        "ok": content is not None,
        "bucket": bucket,
        "key": key,
        "validation_token": content.validation_token if content is not None else None,
        "outcomes": outcomes,
    }


def run_once(
    *,
    settings: Optional[RemoteCacheSettings] = None,
    transport: Optional[Transport] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """
    Watch the configured object for one run.

    - Resolves settings from env unless given.
    - Builds an S3 transport (honoring region / endpoint) unless one is injected.
    - Starts from an unfetched handle, so the first poll is an unconditional read.

    Returns: {"ok": bool, "bucket", "key", "validation_token", "outcomes": [...]}.
    """
    cfg = settings or RemoteCacheSettings.from_env()
    logging.getLogger().setLevel(cfg.log_level)

    tr = transport or S3Transport.from_settings(cfg)
    handle: VersionedHandle[Any] = create_unfetched(cfg.bucket, cfg.key, _decoder_for(cfg.format))
    handle, outcomes = watch(
        handle, tr, polls=cfg.polls, interval=cfg.interval_seconds, sleep=sleep
    )
    return _summarize(handle, outcomes)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """AWS Lambda entry for a scheduled watch run.

    Environment: see `remote_cache.config.RemoteCacheSettings`.
    """
    return run_once()
