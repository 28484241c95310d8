"""
w3name.ipns.record
------------------
Builds signed IPNS entries from revisions, and verifies and decodes received
entries back into revisions.

Two signatures are written on every entry:

- v1 over value ++ "EOL" ++ validity (legacy, kept for older resolvers)
- v2 over "ipns-signature:" ++ data, where data is the canonical CBOR map of
  TTL, Value, Sequence, Validity and ValidityType

On validation the v2 signature is authoritative whenever signatureV2 and data
are both present; otherwise the v1 signature is checked.
"""

from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

import cbor2

from w3name.constants import (
    MAX_INT64,
    MIN_INT64,
    MAX_UINT64,
    V1_VALIDITY_TYPE_LITERAL,
    V2_SIGNATURE_PREFIX,
    VALIDITY_TYPE_EOL,
)
from w3name.errors import (
    InvalidDateString,
    InvalidSignatureV1,
    InvalidSignatureV2,
    InvalidUtf8,
    PayloadEncodingError,
    SignatureDataMismatch,
)
from w3name.ipns.entry import IpnsEntry
from w3name.logger import get_logger
from w3name.name import Name, WritableName
from w3name.revision import Revision
from w3name.utils import canonical_cbor, duration_ns, parse_rfc3339, utc_now

log = get_logger("w3name.ipns")

# Canonical CBOR key order: length first, then bytewise.
V2_DATA_KEYS = ("TTL", "Value", "Sequence", "Validity", "ValidityType")


class SignatureScheme(Enum):
    V2 = "v2"
    LEGACY = "v1"


# --------- Signing data ----------
def v1_signature_data(value: bytes, validity: bytes) -> bytes:
    # the legacy scheme only ever signed EOL validity
    return value + V1_VALIDITY_TYPE_LITERAL + validity


def v2_signature_data(value: bytes, validity: bytes, sequence: int, ttl: int) -> bytes:
    fields: Dict[str, Any] = {
        "TTL": ttl,
        "Value": value,
        "Sequence": sequence,
        "Validity": validity,
        "ValidityType": VALIDITY_TYPE_EOL,
    }
    try:
        return canonical_cbor({k: fields[k] for k in V2_DATA_KEYS})
    except (cbor2.CBOREncodeError, ValueError, TypeError) as e:
        raise PayloadEncodingError(f"cannot encode v2 signature data: {e}") from e


def compute_ttl(validity: datetime, now: Optional[datetime] = None) -> int:
    """
    Nanoseconds from now until validity, as stored in the entry's ttl field.

    Saturates at the signed 64-bit maximum, then is stored as unsigned, so an
    already-expired validity wraps around.
    """
    ns = duration_ns(now or utc_now(), validity)
    if not MIN_INT64 <= ns <= MAX_INT64:
        ns = MAX_INT64
    return ns & MAX_UINT64


# --------- Construction ----------
def revision_to_ipns_entry(revision: Revision, signer: WritableName, now: Optional[datetime] = None) -> IpnsEntry:
    value = revision.value.encode("utf-8")
    validity = revision.validity_string().encode("ascii")
    ttl = compute_ttl(revision.validity, now)

    signature_v1 = signer.sign(v1_signature_data(value, validity))
    data = v2_signature_data(value, validity, revision.sequence, ttl)
    signature_v2 = signer.sign(V2_SIGNATURE_PREFIX + data)

    log.debug(f"[IPNS] built entry name={revision.name} seq={revision.sequence} ttl={ttl}")
    return IpnsEntry(
        value=value,
        signature_v1=signature_v1,
        validity_type=VALIDITY_TYPE_EOL,
        validity=validity,
        sequence=revision.sequence,
        ttl=ttl,
        signature_v2=signature_v2,
        data=data,
    )


def serialize_ipns_entry(entry: IpnsEntry) -> bytes:
    return entry.to_bytes()


def deserialize_ipns_entry(entry_bytes: bytes) -> IpnsEntry:
    return IpnsEntry.from_bytes(entry_bytes)


# --------- Validation ----------
def select_signature_scheme(entry: IpnsEntry) -> SignatureScheme:
    if entry.signature_v2 and entry.data:
        return SignatureScheme.V2
    return SignatureScheme.LEGACY


def _validate_v2(entry: IpnsEntry, name: Name) -> None:
    if not name.verify(V2_SIGNATURE_PREFIX + entry.data, entry.signature_v2):
        raise InvalidSignatureV2()

    try:
        data = cbor2.loads(entry.data)
    except (cbor2.CBORDecodeError, ValueError) as e:
        raise SignatureDataMismatch(f"undecodable v2 signature data: {e}") from e
    if not isinstance(data, dict):
        raise SignatureDataMismatch("v2 signature data is not a map")

    # absent top-level fields read as their protobuf defaults
    expected = {
        "Value": entry.value or b"",
        "Validity": entry.validity or b"",
        "Sequence": entry.sequence or 0,
        "TTL": entry.ttl or 0,
        "ValidityType": entry.validity_type or 0,
    }
    for key, want in expected.items():
        got = data.get(key)
        if type(got) is not type(want) or got != want:
            raise SignatureDataMismatch(f"v2 signature data field {key} does not match entry")


def _validate_v1(entry: IpnsEntry, name: Name) -> None:
    if not entry.signature_v1:
        raise InvalidSignatureV1("entry has no v1 signature")
    msg = v1_signature_data(entry.value or b"", entry.validity or b"")
    if not name.verify(msg, entry.signature_v1):
        raise InvalidSignatureV1()


def validate_ipns_entry(entry: IpnsEntry, name: Name) -> None:
    scheme = select_signature_scheme(entry)
    if scheme is SignatureScheme.V2:
        _validate_v2(entry, name)
    else:
        _validate_v1(entry, name)
    log.debug(f"[IPNS] entry verified name={name} scheme={scheme.value}")


def revision_from_ipns_entry(entry: IpnsEntry, name: Name) -> Revision:
    try:
        value = (entry.value or b"").decode("utf-8")
        validity_str = (entry.validity or b"").decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8(str(e)) from e
    try:
        validity = parse_rfc3339(validity_str)
    except ValueError as e:
        raise InvalidDateString(str(e)) from e
    return Revision(name, value, entry.sequence or 0, validity)


def verify_and_decode(entry_bytes: bytes, name: Name) -> Revision:
    entry = deserialize_ipns_entry(entry_bytes)
    validate_ipns_entry(entry, name)
    return revision_from_ipns_entry(entry, name)
