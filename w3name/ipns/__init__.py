# w3name/ipns/__init__.py

from .entry import IpnsEntry
from .record import (
    SignatureScheme,
    deserialize_ipns_entry,
    revision_from_ipns_entry,
    revision_to_ipns_entry,
    select_signature_scheme,
    serialize_ipns_entry,
    validate_ipns_entry,
    verify_and_decode,
)

__all__ = [
    "IpnsEntry",
    "SignatureScheme",
    "deserialize_ipns_entry",
    "revision_from_ipns_entry",
    "revision_to_ipns_entry",
    "select_signature_scheme",
    "serialize_ipns_entry",
    "validate_ipns_entry",
    "verify_and_decode",
]
