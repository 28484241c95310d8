"""
w3name.wire
-----------
Protocol-buffer wire primitives shared by the IPNS entry schema and the libp2p
key encodings. Only what those two messages need: varints, length-delimited
fields, and skipping of fixed-width fields on decode.

Errors are raised as ValueError; callers translate them into their own types.
"""

from __future__ import annotations
from typing import Iterator, Tuple, Union

from .constants import MAX_UINT64

WIRE_VARINT = 0
WIRE_I64 = 1
WIRE_LEN = 2
WIRE_I32 = 5

_MAX_VARINT_LEN = 10


def encode_varint(n: int) -> bytes:
    if n < 0 or n > MAX_UINT64:
        raise ValueError(f"varint out of uint64 range: {n}")
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(b | 0x80)
        else:
            out.append(b)
            return bytes(out)


def decode_varint(buf: bytes, pos: int = 0) -> Tuple[int, int]:
    """Return (value, next position)."""
    result = 0
    shift = 0
    for i in range(_MAX_VARINT_LEN):
        if pos >= len(buf):
            raise ValueError("truncated varint")
        b = buf[pos]
        pos += 1
        result |= (b & 0x7F) << shift
        if not b & 0x80:
            if result > MAX_UINT64:
                raise ValueError("varint overflows uint64")
            return result, pos
        shift += 7
    raise ValueError("varint too long")


def field_varint(number: int, value: int) -> bytes:
    return encode_varint(number << 3 | WIRE_VARINT) + encode_varint(value)


def field_bytes(number: int, data: bytes) -> bytes:
    return encode_varint(number << 3 | WIRE_LEN) + encode_varint(len(data)) + bytes(data)


def iter_fields(buf: bytes) -> Iterator[Tuple[int, int, Union[int, bytes]]]:
    """
    Yield (field number, wire type, value) for every field in a message.

    Varints come back as int, everything else as the raw bytes of the field.
    """
    pos = 0
    end = len(buf)
    while pos < end:
        key, pos = decode_varint(buf, pos)
        number, wire_type = key >> 3, key & 0x07
        if number == 0:
            raise ValueError("invalid field number 0")

        if wire_type == WIRE_VARINT:
            value, pos = decode_varint(buf, pos)
            yield number, wire_type, value
            continue

        if wire_type == WIRE_LEN:
            size, pos = decode_varint(buf, pos)
        elif wire_type == WIRE_I64:
            size = 8
        elif wire_type == WIRE_I32:
            size = 4
        else:
            raise ValueError(f"unsupported wire type {wire_type} for field {number}")

        if pos + size > end:
            raise ValueError(f"truncated field {number}")
        yield number, wire_type, bytes(buf[pos:pos + size])
        pos += size
