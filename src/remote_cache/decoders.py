from __future__ import annotations

import io
from typing import Any, Generic, Protocol, Type, TypeVar, Union, runtime_checkable

import cbor2
from cryptography.fernet import Fernet, InvalidToken
from pydantic import TypeAdapter, ValidationError

from .errors import DecodeError


T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class Decoder(Protocol[T_co]):
    """Turns a complete object body into a typed value.

    Implementations are stateless and perform no I/O. Any failure must be
    raised as `DecodeError`.
    """

    def decode(self, data: bytes) -> T_co:
        ...


class BytesDecoder:
    """Identity decoder: the body as raw bytes."""

    def decode(self, data: bytes) -> bytes:
        return bytes(data)

    def __repr__(self) -> str:
        return "BytesDecoder()"


class TextDecoder:
    """Decodes the body as UTF-8 text."""

    def decode(self, data: bytes) -> str:
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as ex:
            raise DecodeError(f"Body is not valid UTF-8: {ex}") from ex

    def __repr__(self) -> str:
        return "TextDecoder()"


class _ValidatingDecoder(Generic[T]):
    """Shared base for structured formats validated into `target` with pydantic."""

    format_name = "structured"

    def __init__(self, target: Union[Type[T], Any], *, strict: bool = True) -> None:
        self._target = target
        self._strict = strict
        self._adapter: TypeAdapter[T] = TypeAdapter(target)

    @property
    def target(self) -> Any:
        return self._target

    def _validate(self, raw: Any) -> T:
        try:
            return self._adapter.validate_python(raw, strict=self._strict)
        except ValidationError as ve:
            raise DecodeError(
                f"{self.format_name} payload does not match {self._target_name()}: {ve}"
            ) from ve

    def _target_name(self) -> str:
        return getattr(self._target, "__name__", repr(self._target))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._target_name()})"


class JsonDecoder(_ValidatingDecoder[T]):
    """
    Decodes a JSON body into `target`.

    `target` is anything pydantic can validate: a `BaseModel` subclass, a
    dataclass, `dict[str, int]`, etc. Malformed JSON and schema mismatches both
    raise `DecodeError`. Validation is strict by default: `"1"` is not an
    `int`. Pass `strict=False` to let pydantic coerce.
    """

    format_name = "JSON"

    def decode(self, data: bytes) -> T:
        try:
            return self._adapter.validate_json(bytes(data), strict=self._strict)
        except ValidationError as ve:
            raise DecodeError(
                f"JSON payload does not match {self._target_name()}: {ve}"
            ) from ve


class CborDecoder(_ValidatingDecoder[T]):
    """Decodes a CBOR body into `target` (parsed with cbor2, validated with pydantic)."""

    format_name = "CBOR"

    def decode(self, data: bytes) -> T:
        payload = bytes(data)
        fp = io.BytesIO(payload)
        try:
            raw = cbor2.CBORDecoder(fp).decode()
        except cbor2.CBORDecodeError as ex:
            raise DecodeError(f"Body is not valid CBOR: {ex}") from ex
        if fp.tell() != len(payload):
            raise DecodeError(
                f"Body has {len(payload) - fp.tell()} trailing bytes after the CBOR item"
            )
        return self._validate(raw)


def _to_fernet(key: str | bytes) -> Fernet:
    if isinstance(key, str):
        key_bytes = key.encode("utf-8")
    else:
        key_bytes = key
    return Fernet(key_bytes)


class FernetDecoder(Generic[T]):
    """
    Decrypts a Fernet token, then hands the plaintext to `inner`.

    The key must be a URL-safe base64-encoded 32-byte key (str or bytes), as
    returned by `cryptography.fernet.Fernet.generate_key()`.
    """

    def __init__(self, inner: Decoder[T], key: str | bytes) -> None:
        self._inner = inner
        self._fernet = _to_fernet(key)

    def decode(self, data: bytes) -> T:
        try:
            plaintext = self._fernet.decrypt(bytes(data))
        except InvalidToken as ex:
            raise DecodeError("Failed to decrypt body: invalid Fernet token") from ex
        return self._inner.decode(plaintext)

    def __repr__(self) -> str:
        return f"FernetDecoder({self._inner!r})"


__all__ = [
    "Decoder",
    "BytesDecoder",
    "TextDecoder",
    "JsonDecoder",
    "CborDecoder",
    "FernetDecoder",
]
