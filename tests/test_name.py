import base64

import pytest
from multiformats import CID, multihash

from w3name.crypto import encode_public_key
from w3name.errors import InvalidCodec, InvalidIdentifierString, InvalidKey, InvalidNameError
from w3name.name import Name, WritableName


def test_create_writable_name():
    name = WritableName.new()
    cid = CID.decode(name.to_string())
    assert cid.codec.code == 0x72
    assert cid.hashfun.code == 0x0  # identity hash
    assert cid.version == 1
    assert name.to_string().startswith("k")
    assert bytes(cid) == name.to_bytes()


def test_writable_name_from_private_key():
    name_str = "k51qzi5uqu5dkgso0xihmnkn1sthxgs3nilzmofwy29jrplwdtk6sc14x9f2zv"
    private_key = base64.b64decode(
        "CAESQI8NcJgBK+9qfSBz/ZiXNuw4OJkUTn4jWZvd3Sj8W6GLq900cwz32d6ylbqBl81WRgM6QvSEXMwGlEODgEkXCes="
    )
    name = WritableName.from_private_key(private_key)
    assert name.to_string() == name_str
    assert str(name.to_name()) == name_str
    assert name.key_bytes == private_key


def test_parse_name():
    name_str = "k51qzi5uqu5dl2hq2hm5m29sdq1lum0kb0lmyqsowicmrmxzxywwgxhy6ymrdv"
    name = Name.parse(name_str)
    assert name.to_string() == name_str
    assert Name.parse(name.to_string()) == name


def test_parse_round_trip_for_new_names():
    for _ in range(5):
        name = WritableName.new().to_name()
        assert Name.parse(str(name)) == name


def test_parse_rejects_cidv0():
    with pytest.raises(InvalidCodec):
        Name.parse("QmPFpDRC87jTdSYxjnEZUTjJuYF5yLRWxir3DzJ1XiVZ3t")


def test_parse_rejects_non_libp2p_codec():
    with pytest.raises(InvalidNameError):
        Name.parse("k2jmtxx8tc9pv6b9sj5wm71mheawu849x2bzkjuecpwizjwjeufiadl6")


def test_parse_rejects_wrong_codec_with_valid_key():
    pub = WritableName.new().public_key
    digest = multihash.wrap(encode_public_key(pub), "identity")
    wrong = CID("base36", 1, "raw", digest)
    with pytest.raises(InvalidCodec):
        Name.parse(str(wrong))


def test_parse_rejects_malformed_string():
    with pytest.raises(InvalidIdentifierString):
        Name.parse("not a cid!")


def test_parse_rejects_undecodable_key():
    digest = multihash.wrap(b"\x08\x01\x12\x03abc", "identity")
    bad = CID("base36", 1, "libp2p-key", digest)
    with pytest.raises(InvalidKey):
        Name.parse(str(bad))


def test_parse_rejects_unsupported_key_type():
    # KeyType 2 = Secp256k1
    digest = multihash.wrap(b"\x08\x02\x12\x21" + b"\x02" * 33, "identity")
    bad = CID("base36", 1, "libp2p-key", digest)
    with pytest.raises(InvalidKey):
        Name.parse(str(bad))


def test_private_key_with_mismatched_public_half():
    a, b = WritableName.new(), WritableName.new()
    forged = a.key_bytes[:-32] + b.public_key
    with pytest.raises(InvalidKey):
        WritableName.from_private_key(forged)


def test_sign_and_verify():
    writable = WritableName.new()
    sig = writable.sign(b"hello")
    assert writable.to_name().verify(b"hello", sig)
    assert not writable.to_name().verify(b"hellO", sig)
    assert not WritableName.new().to_name().verify(b"hello", sig)


def test_private_key_not_in_repr():
    writable = WritableName.new()
    assert writable.private_key.hex() not in repr(writable)


@pytest.mark.parametrize("s", ["", "k", "z", "f", "b"])
def test_parse_rejects_truncated_string(s):
    with pytest.raises(InvalidIdentifierString):
        Name.parse(s)
