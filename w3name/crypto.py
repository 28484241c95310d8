from __future__ import annotations
from typing import Tuple
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ed25519
from .constants import KEY_TYPE_ED25519
from .errors import InvalidKey, SigningError
from .wire import WIRE_LEN, WIRE_VARINT, field_bytes, field_varint, iter_fields

"""
w3name.crypto
-------------
Cryptographic primitives for name records:

- Ed25519: signing and verification over raw key bytes
- libp2p key encodings: the protobuf PublicKey / PrivateKey messages that are
  embedded in name identifiers and stored in key files

Keys travel through the package as raw bytes; cryptography key objects are
built at the point of use.
"""

ED25519_KEY_LEN = 32

# --------- Ed25519 (sign/verify) ----------
def ed25519_generate() -> Tuple[bytes, bytes]:
    sk = ed25519.Ed25519PrivateKey.generate()
    pk = sk.public_key()
    return sk.private_bytes_raw(), pk.public_bytes_raw()

def ed25519_public_from_private(priv_raw: bytes) -> bytes:
    try:
        sk = ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw)
    except ValueError as e:
        raise InvalidKey(f"invalid Ed25519 private key: {e}") from e
    return sk.public_key().public_bytes_raw()

def ed25519_sign(priv_raw: bytes, data: bytes) -> bytes:
    try:
        sk = ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw)
        return sk.sign(data)
    except ValueError as e:
        raise SigningError(str(e)) from e

def ed25519_verify(pub_raw: bytes, sig: bytes, data: bytes) -> bool:
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(pub_raw).verify(sig, data)
        return True
    except (InvalidSignature, ValueError):
        return False

# --------- libp2p key encodings ----------
def encode_public_key(pub_raw: bytes) -> bytes:
    # PublicKey { required KeyType Type = 1; required bytes Data = 2; }
    return field_varint(1, KEY_TYPE_ED25519) + field_bytes(2, pub_raw)

def encode_private_key(priv_raw: bytes, pub_raw: bytes) -> bytes:
    # Ed25519 private key data is seed || public key
    return field_varint(1, KEY_TYPE_ED25519) + field_bytes(2, priv_raw + pub_raw)

def _decode_key_message(buf: bytes) -> Tuple[int, bytes]:
    key_type = None
    data = None
    try:
        for number, wire_type, value in iter_fields(buf):
            if number == 1 and wire_type == WIRE_VARINT:
                key_type = value
            elif number == 2 and wire_type == WIRE_LEN:
                data = value
            else:
                raise InvalidKey(f"unexpected field {number} in key message")
    except ValueError as e:
        raise InvalidKey(f"malformed key message: {e}") from e

    if key_type is None or data is None:
        raise InvalidKey("key message is missing Type or Data")
    if key_type != KEY_TYPE_ED25519:
        raise InvalidKey(f"unsupported key type {key_type}")
    return key_type, data

def decode_public_key(buf: bytes) -> bytes:
    _, data = _decode_key_message(buf)
    if len(data) != ED25519_KEY_LEN:
        raise InvalidKey(f"Ed25519 public key must be {ED25519_KEY_LEN} bytes, got {len(data)}")
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(data)
    except ValueError as e:
        raise InvalidKey(str(e)) from e
    return data

def decode_private_key(buf: bytes) -> Tuple[bytes, bytes]:
    """Return (seed, public key) from a libp2p PrivateKey message."""
    _, data = _decode_key_message(buf)
    if len(data) != 2 * ED25519_KEY_LEN:
        raise InvalidKey(f"Ed25519 keypair must be {2 * ED25519_KEY_LEN} bytes, got {len(data)}")
    priv_raw, pub_raw = data[:ED25519_KEY_LEN], data[ED25519_KEY_LEN:]
    if ed25519_public_from_private(priv_raw) != pub_raw:
        raise InvalidKey("public key does not match private key")
    return priv_raw, pub_raw
