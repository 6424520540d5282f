from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import RemoteCacheSettings
from .errors import TransportError
from .transport import NotModified, ObjectBody, ReadOutcome


logger = logging.getLogger(__name__)

# Codes botocore reports for an If-None-Match hit on GetObject
_NOT_MODIFIED_CODES = ("304", "NotModified")


def _error_code(e: ClientError) -> Optional[str]:
    code = e.response.get("Error", {}).get("Code")
    return str(code) if code is not None else None


def _status_code(e: ClientError) -> Optional[int]:
    meta: Dict[str, Any] = e.response.get("ResponseMetadata", {}) or {}
    status = meta.get("HTTPStatusCode")
    return int(status) if status is not None else None


class S3Transport:
    """
    Conditional reads of single S3 objects via boto3 `get_object`.

    - When a validation token is given it is sent as `IfNoneMatch`; S3 then
      answers 304 (surfaced by botocore as a `ClientError`) if the ETag still
      matches, which is returned as `NotModified`.
    - The response `ETag` (usually a quoted string) becomes the new token, or
      `None` when the store omits it.
    - Every other failure, including a broken body stream, is raised as
      `TransportError` with the S3 error code attached when available.

    `endpoint_url` allows S3-compatible stores (e.g. MinIO on
    http://127.0.0.1:9000).
    """

    def __init__(
        self,
        *,
        s3: Optional[object] = None,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        self._s3 = s3 or boto3.client("s3", region_name=region_name, endpoint_url=endpoint_url)

    @classmethod
    def from_settings(cls, settings: RemoteCacheSettings) -> "S3Transport":
        return cls(region_name=settings.region_name, endpoint_url=settings.endpoint_url)

    def get_object(
        self,
        bucket_id: str,
        object_key: str,
        validation_token: Optional[str] = None,
    ) -> ReadOutcome:
        params: Dict[str, Any] = {"Bucket": bucket_id, "Key": object_key}
        if validation_token is not None:
            params["IfNoneMatch"] = validation_token

        try:
            resp = self._s3.get_object(**params)  # type: ignore[attr-defined]
        except ClientError as e:
            code = _error_code(e)
            if _status_code(e) == 304 or code in _NOT_MODIFIED_CODES:
                return NotModified()
            raise TransportError(
                f"S3 GetObject failed for s3://{bucket_id}/{object_key}: {code or e}",
                code=code,
            ) from e
        except BotoCoreError as e:
            raise TransportError(
                f"S3 GetObject failed for s3://{bucket_id}/{object_key}: {e}"
            ) from e

        try:
            data = resp["Body"].read()
        except (BotoCoreError, OSError) as e:
            raise TransportError(
                f"Failed to read body of s3://{bucket_id}/{object_key}: {e}"
            ) from e

        etag = resp.get("ETag")
        if etag is None:
            logger.debug("No ETag returned for s3://%s/%s", bucket_id, object_key)
        return ObjectBody(data=data, validation_token=etag)


__all__ = ["S3Transport"]
