"""
w3name.name
-----------
Name identifiers.

A name is the string form of an Ed25519 public key: the libp2p protobuf
encoding of the key, wrapped in an identity multihash, wrapped in a CIDv1 with
the libp2p-key codec, rendered in base36. For example:

    k51qzi5uqu5dka3tmn6ipgsrq1u2bkuowdwlqcw0vibledypt1y9y5i8v8xwvu

Name carries only the public key and can verify records. WritableName also
holds the private key and can sign them.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from multiformats import CID, multihash

from .constants import IDENTITY_HASH, LIBP2P_KEY_CODEC, LIBP2P_KEY_CODEC_NAME, NAME_BASE
from .crypto import (
    decode_private_key,
    decode_public_key,
    ed25519_generate,
    ed25519_sign,
    ed25519_verify,
    encode_private_key,
    encode_public_key,
)
from .errors import InvalidCodec, InvalidIdentifierString


def _cid_for_key(pub_raw: bytes) -> CID:
    digest = multihash.wrap(encode_public_key(pub_raw), IDENTITY_HASH)
    return CID(NAME_BASE, 1, LIBP2P_KEY_CODEC_NAME, digest)


@dataclass(frozen=True)
class Name:
    public_key: bytes

    @classmethod
    def parse(cls, s: str) -> "Name":
        try:
            cid = CID.decode(s)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise InvalidIdentifierString(f"invalid name string {s!r}: {e}") from e
        if cid.codec.code != LIBP2P_KEY_CODEC:
            raise InvalidCodec(
                f"expected codec {LIBP2P_KEY_CODEC_NAME} (0x{LIBP2P_KEY_CODEC:x}), "
                f"got {cid.codec.name} (0x{cid.codec.code:x})"
            )
        return cls(decode_public_key(bytes(cid.raw_digest)))

    def verify(self, data: bytes, sig: bytes) -> bool:
        return ed25519_verify(self.public_key, sig, data)

    def to_cid(self) -> CID:
        return _cid_for_key(self.public_key)

    def to_bytes(self) -> bytes:
        return bytes(self.to_cid())

    def to_string(self) -> str:
        return str(self.to_cid())

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class WritableName:
    private_key: bytes = field(repr=False)
    public_key: bytes

    @classmethod
    def new(cls) -> "WritableName":
        priv, pub = ed25519_generate()
        return cls(priv, pub)

    @classmethod
    def from_private_key(cls, key_bytes: bytes) -> "WritableName":
        """Load from the libp2p protobuf encoding of an Ed25519 keypair."""
        priv, pub = decode_private_key(bytes(key_bytes))
        return cls(priv, pub)

    @property
    def key_bytes(self) -> bytes:
        return encode_private_key(self.private_key, self.public_key)

    def sign(self, data: bytes) -> bytes:
        return ed25519_sign(self.private_key, data)

    def to_name(self) -> Name:
        return Name(self.public_key)

    def to_cid(self) -> CID:
        return self.to_name().to_cid()

    def to_bytes(self) -> bytes:
        return self.to_name().to_bytes()

    def to_string(self) -> str:
        return self.to_name().to_string()

    def __str__(self) -> str:
        return self.to_string()
