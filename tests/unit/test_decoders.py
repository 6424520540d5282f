from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import cbor2
import pytest
from cryptography.fernet import Fernet
from pydantic import BaseModel

from remote_cache.decoders import (
    BytesDecoder,
    CborDecoder,
    Decoder,
    FernetDecoder,
    JsonDecoder,
    TextDecoder,
)
from remote_cache.errors import DecodeError


class MyStruct(BaseModel):
    key: str


@dataclass
class Point:
    x: int
    y: int


def test_bytes_decoder_is_identity():
    assert BytesDecoder().decode(b"hello") == b"hello"
    assert BytesDecoder().decode(bytearray(b"\x00\xff")) == b"\x00\xff"


def test_text_decoder_utf8():
    assert TextDecoder().decode("héllo".encode("utf-8")) == "héllo"


def test_text_decoder_rejects_invalid_utf8():
    with pytest.raises(DecodeError):
        TextDecoder().decode(b"\xff\xfe\xfa")


def test_json_decoder_into_model():
    assert JsonDecoder(MyStruct).decode(b'{"key": "value"}') == MyStruct(key="value")


def test_json_decoder_into_dataclass_and_generic_types():
    assert JsonDecoder(Point).decode(b'{"x": 1, "y": 2}') == Point(x=1, y=2)
    assert JsonDecoder(Dict[str, List[int]]).decode(b'{"a": [1, 2]}') == {"a": [1, 2]}


@pytest.mark.parametrize("payload", [b"bad data", b'{"nope": 1}', b'{"key": '])
def test_json_decoder_failures_are_decode_errors(payload: bytes):
    with pytest.raises(DecodeError):
        JsonDecoder(MyStruct).decode(payload)


def test_cbor_decoder_into_model():
    payload = cbor2.dumps({"key": "value"})
    assert CborDecoder(MyStruct).decode(payload) == MyStruct(key="value")


def test_cbor_decoder_bad_data():
    with pytest.raises(DecodeError):
        CborDecoder(MyStruct).decode(b"bad data")


def test_cbor_decoder_truncated_input():
    payload = cbor2.dumps({"key": "value"})[:-2]
    with pytest.raises(DecodeError):
        CborDecoder(MyStruct).decode(payload)


def test_fernet_decoder_decrypts_then_delegates():
    key = Fernet.generate_key()
    token = Fernet(key).encrypt(b'{"key": "secret"}')

    dec = FernetDecoder(JsonDecoder(MyStruct), key.decode("ascii"))
    assert dec.decode(token) == MyStruct(key="secret")


def test_fernet_decoder_rejects_foreign_ciphertext():
    dec = FernetDecoder(TextDecoder(), Fernet.generate_key())
    other = Fernet(Fernet.generate_key()).encrypt(b"hello")
    with pytest.raises(DecodeError):
        dec.decode(other)
    with pytest.raises(DecodeError):
        dec.decode(b"garbage")


def test_builtin_decoders_satisfy_protocol():
    for dec in (BytesDecoder(), TextDecoder(), JsonDecoder(MyStruct), CborDecoder(MyStruct)):
        assert isinstance(dec, Decoder)


def test_json_decoder_is_strict_about_types():
    with pytest.raises(DecodeError):
        JsonDecoder(Point).decode(b'{"x": "1", "y": "2"}')
    with pytest.raises(DecodeError):
        JsonDecoder(MyStruct).decode(b'{"key": 5}')


def test_json_decoder_lax_mode_coerces():
    assert JsonDecoder(Point, strict=False).decode(b'{"x": "1", "y": "2"}') == Point(x=1, y=2)


def test_cbor_decoder_is_strict_about_types():
    with pytest.raises(DecodeError):
        CborDecoder(MyStruct).decode(cbor2.dumps({"key": 5}))


def test_cbor_decoder_rejects_trailing_bytes():
    with pytest.raises(DecodeError):
        CborDecoder(str).decode(cbor2.dumps("ok") + b"GARBAGE")
    with pytest.raises(DecodeError):
        CborDecoder(MyStruct).decode(cbor2.dumps({"key": "value"}) * 2)
    assert CborDecoder(str).decode(cbor2.dumps("ok")) == "ok"
