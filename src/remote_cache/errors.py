from __future__ import annotations

from typing import Optional


class FetchError(RuntimeError):
    """Base error for fetching and refreshing a remote object."""


class TransportError(FetchError):
    """The read collaborator failed (network, auth, missing object, bad response).

    `code` carries the store's error code or HTTP status when one is known.
    """

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code


class DecodeError(FetchError):
    """Fetched bytes could not be converted to the decoder's target type."""


class UnexpectedNotModifiedError(FetchError):
    """The store answered "not modified" to a read that carried no validation token."""


__all__ = [
    "FetchError",
    "TransportError",
    "DecodeError",
    "UnexpectedNotModifiedError",
]
