from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote

import httpx

from .errors import TransportError
from .transport import NotModified, ObjectBody, ReadOutcome


class HttpTransport:
    """
    Conditional GETs against a plain HTTP(S) object endpoint.

    Notes
    - Objects are addressed as `{base_url}/{bucket}/{key}` (path-style, as
      served by S3-compatible gateways and static file hosts).
    - The validation token is sent as `If-None-Match`; 304 maps to
      `NotModified`, 200 to the body and its `ETag` header.
    - No retries: every non-200/304 status and every httpx error is raised as
      `TransportError` with the status code when there is one.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self._timeout, headers=headers)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def object_url(self, bucket_id: str, object_key: str) -> str:
        key = quote(object_key.lstrip("/"), safe="/")
        return f"{self._base_url}/{quote(bucket_id, safe='')}/{key}"

    def get_object(
        self,
        bucket_id: str,
        object_key: str,
        validation_token: Optional[str] = None,
    ) -> ReadOutcome:
        url = self.object_url(bucket_id, object_key)
        headers: Dict[str, str] = {}
        if validation_token is not None:
            headers["If-None-Match"] = validation_token

        try:
            resp = self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc

        if resp.status_code == 304:
            return NotModified()
        if resp.status_code == 200:
            return ObjectBody(data=resp.content, validation_token=resp.headers.get("ETag"))
        raise TransportError(
            f"HTTP {resp.status_code} from {url}: {resp.text[:200]}",
            code=str(resp.status_code),
        )


__all__ = ["HttpTransport"]
