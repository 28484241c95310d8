"""
w3name.revision
---------------
Revision is an unsigned name record: a string value, a sequence number and an
end-of-life timestamp. Revisions are turned into signed IPNS entries by
w3name.ipns.record and recovered from them on resolve.

Revisions can also be persisted locally with encode()/decode(). That format is
unsigned and separate from the IPNS wire format.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import ClassVar, Optional

import cbor2

from .constants import DEFAULT_VALIDITY_PERIOD, MAX_UINT64
from .errors import RevisionDecodeError
from .name import Name
from .utils import canonical_cbor, format_rfc3339_nanos, parse_rfc3339, utc_now


@dataclass(frozen=True)
class Revision:
    name: Name
    value: str
    sequence: int
    validity: datetime

    # Application default, not a protocol rule; override on the class to change it.
    default_validity_period: ClassVar[timedelta] = DEFAULT_VALIDITY_PERIOD

    def __post_init__(self):
        if not 0 <= self.sequence <= MAX_UINT64:
            raise ValueError(f"sequence out of uint64 range: {self.sequence}")
        if self.validity.tzinfo is None:
            raise ValueError("validity must be a timezone-aware datetime")

    @classmethod
    def default_validity(cls, now: Optional[datetime] = None) -> datetime:
        return (now or utc_now()) + cls.default_validity_period

    @classmethod
    def v0(cls, name: Name, value: str) -> "Revision":
        return cls(name, value, 0, cls.default_validity())

    @classmethod
    def v0_with_validity(cls, name: Name, value: str, validity: datetime) -> "Revision":
        return cls(name, value, 0, validity)

    def increment(self, value: str) -> "Revision":
        return self.increment_with_validity(value, self.default_validity())

    def increment_with_validity(self, value: str, validity: datetime) -> "Revision":
        return replace(self, value=value, sequence=self.sequence + 1, validity=validity)

    def validity_string(self) -> str:
        return format_rfc3339_nanos(self.validity)

    # ------------------------------------------------------------------
    # Local persistence
    # ------------------------------------------------------------------
    def encode(self) -> bytes:
        return canonical_cbor({
            "name": self.name.to_string(),
            "value": self.value,
            "sequence": self.sequence,
            "validity": self.validity_string(),
        })

    @classmethod
    def decode(cls, data: bytes) -> "Revision":
        try:
            obj = cbor2.loads(data)
        except (cbor2.CBORDecodeError, ValueError) as e:
            raise RevisionDecodeError(f"invalid revision encoding: {e}") from e

        if not isinstance(obj, dict):
            raise RevisionDecodeError("revision encoding is not a map")
        name, value, sequence, validity = (obj.get(k) for k in ("name", "value", "sequence", "validity"))
        if not (isinstance(name, str) and isinstance(value, str) and isinstance(validity, str)):
            raise RevisionDecodeError("revision name, value and validity must be strings")
        if type(sequence) is not int or not 0 <= sequence <= MAX_UINT64:
            raise RevisionDecodeError(f"invalid revision sequence: {sequence!r}")

        try:
            validity_dt = parse_rfc3339(validity)
        except ValueError as e:
            raise RevisionDecodeError(str(e)) from e
        return cls(Name.parse(name), value, sequence, validity_dt)
