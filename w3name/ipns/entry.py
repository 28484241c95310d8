# w3name/ipns/entry.py
from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Optional

from w3name.errors import EntryDecodeError, EntryEncodeError
from w3name.wire import WIRE_LEN, WIRE_VARINT, field_bytes, field_varint, iter_fields

# (attribute, field number, wire type), in field-number order
SCHEMA = (
    ("value", 1, WIRE_LEN),
    ("signature_v1", 2, WIRE_LEN),
    ("validity_type", 3, WIRE_VARINT),
    ("validity", 4, WIRE_LEN),
    ("sequence", 5, WIRE_VARINT),
    ("ttl", 6, WIRE_VARINT),
    ("pub_key", 7, WIRE_LEN),
    ("signature_v2", 8, WIRE_LEN),
    ("data", 9, WIRE_LEN),
)
_BY_NUMBER = {number: (attr, wire_type) for attr, number, wire_type in SCHEMA}


@dataclass(frozen=True)
class IpnsEntry:
    """
    Signed IPNS record as sent over the wire.

    Every field is optional; None means the field is absent from the encoding.
    Present fields are always written, even when empty or zero.
    """
    value: Optional[bytes] = None
    signature_v1: Optional[bytes] = None
    validity_type: Optional[int] = None
    validity: Optional[bytes] = None
    sequence: Optional[int] = None
    ttl: Optional[int] = None
    pub_key: Optional[bytes] = None
    signature_v2: Optional[bytes] = None
    data: Optional[bytes] = None

    def to_bytes(self) -> bytes:
        out = bytearray()
        for attr, number, wire_type in SCHEMA:
            v = getattr(self, attr)
            if v is None:
                continue
            try:
                if wire_type == WIRE_VARINT:
                    out += field_varint(number, v)
                else:
                    out += field_bytes(number, v)
            except (ValueError, TypeError) as e:
                raise EntryEncodeError(f"cannot encode field {attr}: {e}") from e
        return bytes(out)

    @classmethod
    def from_bytes(cls, buf: bytes) -> "IpnsEntry":
        values = {}
        try:
            for number, wire_type, v in iter_fields(buf):
                known = _BY_NUMBER.get(number)
                if known is None:
                    continue
                attr, expected = known
                if wire_type != expected:
                    raise EntryDecodeError(f"field {attr} has wire type {wire_type}, expected {expected}")
                values[attr] = v
        except ValueError as e:
            raise EntryDecodeError(f"malformed IPNS entry: {e}") from e
        return cls(**values)

    def present_fields(self):
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]
