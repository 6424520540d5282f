from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, Optional, Tuple, TypeVar

from .content import Content
from .decoders import Decoder
from .errors import DecodeError, FetchError, TransportError, UnexpectedNotModifiedError
from .transport import NotModified, ObjectBody, ReadOutcome, Transport


logger = logging.getLogger(__name__)

T = TypeVar("T")


class VersionedHandle(Generic[T]):
    """
    Handle to a single remote object, refreshed only when the store reports a change.

    A handle is one of two immutable variants:
    - `Unfetched`: identity (`bucket_id`, `object_key`) and decoder only.
    - `Fetched`: identity, decoder and the decoded `Content` with its token.

    Refreshing never mutates a handle. `refresh()` returns a new `Fetched`
    handle when the object changed, `None` when it did not, and raises a
    `FetchError` on failure. In the `None` and error cases the caller keeps
    using the handle it already holds.

    The transport is passed to every call; handles hold no connections.
    """

    bucket_id: str
    object_key: str
    decoder: Decoder[T]
    content: Optional[Content[T]]

    # -------- Construction helpers --------
    @staticmethod
    def unfetched(bucket_id: str, object_key: str, decoder: Decoder[T]) -> "Unfetched[T]":
        return Unfetched(bucket_id=bucket_id, object_key=object_key, decoder=decoder)

    @staticmethod
    def fetched(
        bucket_id: str,
        object_key: str,
        decoder: Decoder[T],
        transport: Transport,
    ) -> "Fetched[T]":
        """Create a handle and load it immediately.

        Performs an unconditional read. Raises:
        - UnexpectedNotModifiedError if the transport answers "not modified"
          although no token was sent.
        - TransportError / DecodeError as `refresh()` does.
        """
        handle = Unfetched(bucket_id=bucket_id, object_key=object_key, decoder=decoder)
        outcome = handle._read(transport, None)
        if isinstance(outcome, NotModified):
            raise UnexpectedNotModifiedError(
                f"Store reported not modified for {bucket_id}/{object_key} "
                "but no validation token was sent"
            )
        return handle._successor(outcome)

    # -------- Accessors --------
    def identity(self) -> Tuple[str, str]:
        return (self.bucket_id, self.object_key)

    @property
    def is_fetched(self) -> bool:
        return self.content is not None

    # -------- Core operations --------
    def refresh(self, transport: Transport) -> Optional["Fetched[T]"]:
        """Conditionally re-read the object.

        Returns:
        - None if the store reports the object unchanged.
        - A new `Fetched` handle (same identity) carrying the new token and body.
        Raises:
        - TransportError for any failure of the read itself.
        - DecodeError if the new body cannot be decoded; no handle is produced.
        """
        token = self._precondition()
        outcome = self._read(transport, token)
        if isinstance(outcome, NotModified):
            logger.debug(
                "Not modified: %s/%s (token %s)", self.bucket_id, self.object_key, token
            )
            return None
        return self._successor(outcome)

    # -------- Internal --------
    def _precondition(self) -> Optional[str]:
        current = self.content
        return current.validation_token if current is not None else None

    def _read(self, transport: Transport, token: Optional[str]) -> ReadOutcome:
        if token is None:
            logger.debug("Reading %s/%s", self.bucket_id, self.object_key)
        else:
            logger.debug(
                "Reading %s/%s if none match %s", self.bucket_id, self.object_key, token
            )
        try:
            outcome = transport.get_object(self.bucket_id, self.object_key, token)
        except FetchError:
            raise
        except Exception as ex:
            raise TransportError(
                f"Read failed for {self.bucket_id}/{self.object_key}: {ex}"
            ) from ex

        if not isinstance(outcome, (NotModified, ObjectBody)):
            raise TransportError(
                f"Unexpected transport response for {self.bucket_id}/{self.object_key}: "
                f"{outcome!r}"
            )
        return outcome

    def _successor(self, outcome: ObjectBody) -> "Fetched[T]":
        try:
            body = self.decoder.decode(outcome.data)
        except DecodeError:
            logger.warning(
                "Failed to decode %s/%s (token %s) with %r",
                self.bucket_id,
                self.object_key,
                outcome.validation_token,
                self.decoder,
            )
            raise
        except Exception as ex:
            logger.warning(
                "Decoder %r raised %s for %s/%s",
                self.decoder,
                type(ex).__name__,
                self.bucket_id,
                self.object_key,
            )
            raise DecodeError(
                f"Failed to decode {self.bucket_id}/{self.object_key}: {ex}"
            ) from ex

        logger.debug(
            "Fetched %s/%s with token %s",
            self.bucket_id,
            self.object_key,
            outcome.validation_token,
        )
        return Fetched(
            bucket_id=self.bucket_id,
            object_key=self.object_key,
            decoder=self.decoder,
            content=Content(outcome.validation_token, body),
        )


@dataclass(frozen=True)
class Unfetched(VersionedHandle[T]):
    bucket_id: str
    object_key: str
    decoder: Decoder[T] = field(compare=False)

    @property
    def content(self) -> None:
        return None


@dataclass(frozen=True)
class Fetched(VersionedHandle[T]):
    bucket_id: str
    object_key: str
    decoder: Decoder[T] = field(compare=False)
    # Hash covers identity only; equal handles share identity
    content: Content[T] = field(hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.content, Content):
            raise TypeError("Fetched handle requires Content")


# -------- Convenience top-level helpers --------
def create_unfetched(bucket_id: str, object_key: str, decoder: Decoder[T]) -> Unfetched[T]:
    return VersionedHandle.unfetched(bucket_id, object_key, decoder)


def create_fetched(
    bucket_id: str,
    object_key: str,
    decoder: Decoder[T],
    transport: Transport,
) -> Fetched[T]:
    return VersionedHandle.fetched(bucket_id, object_key, decoder, transport)


__all__ = [
    "VersionedHandle",
    "Unfetched",
    "Fetched",
    "create_unfetched",
    "create_fetched",
]
