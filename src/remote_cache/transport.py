"""
Read collaborator contract for conditional object reads.

A transport is given `(bucket_id, object_key, validation_token)` and answers
with exactly one of:

- `NotModified`: the remote token still matches (only expected when a token
  was supplied).
- `ObjectBody`: the full body plus the store's current token (`None` if the
  store returned none).
- a raised `TransportError` for anything else (network, auth, not found).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Union


@dataclass(frozen=True)
class NotModified:
    pass


@dataclass(frozen=True)
class ObjectBody:
    data: bytes
    validation_token: Optional[str] = None


ReadOutcome = Union[NotModified, ObjectBody]


class Transport(Protocol):
    def get_object(
        self,
        bucket_id: str,
        object_key: str,
        validation_token: Optional[str] = None,
    ) -> ReadOutcome:
        """Read one object, conditionally on `validation_token` when given."""
        ...


__all__ = ["NotModified", "ObjectBody", "ReadOutcome", "Transport"]
