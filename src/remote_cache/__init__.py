"""
Conditionally-refreshed handles to single objects in a remote blob store.

A `VersionedHandle` remembers the object's validation token (ETag) and asks
the store for the body again only when it changed, decoding every new body
with a pluggable `Decoder`. Transports (S3 via boto3, plain HTTP via httpx)
are passed into each call.
"""

from .content import Content
from .decoders import (
    BytesDecoder,
    CborDecoder,
    Decoder,
    FernetDecoder,
    JsonDecoder,
    TextDecoder,
)
from .errors import DecodeError, FetchError, TransportError, UnexpectedNotModifiedError
from .handle import Fetched, Unfetched, VersionedHandle, create_fetched, create_unfetched
from .transport import NotModified, ObjectBody, Transport

__all__ = [
    "Content",
    "Decoder",
    "BytesDecoder",
    "TextDecoder",
    "JsonDecoder",
    "CborDecoder",
    "FernetDecoder",
    "FetchError",
    "TransportError",
    "DecodeError",
    "UnexpectedNotModifiedError",
    "VersionedHandle",
    "Unfetched",
    "Fetched",
    "create_unfetched",
    "create_fetched",
    "NotModified",
    "ObjectBody",
    "Transport",
]
