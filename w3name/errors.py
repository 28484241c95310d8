"""
w3name.errors
-------------
Exception taxonomy for the name-record codec.

- InvalidNameError: a name string or key could not be turned into a Name
- RecordError: building, serializing or parsing a record failed
- ValidationError: a received record did not verify or decode

Transport failures live in w3name.transport.transport_base.
"""


class W3NameError(Exception):
    pass


# --------- Identity ----------
class InvalidNameError(W3NameError):
    pass


class InvalidIdentifierString(InvalidNameError):
    pass


class InvalidCodec(InvalidNameError):
    pass


class InvalidKey(InvalidNameError):
    pass


# --------- Codec ----------
class RecordError(W3NameError):
    pass


class SigningError(RecordError):
    pass


class PayloadEncodingError(RecordError):
    pass


class EntryEncodeError(RecordError):
    pass


class EntryDecodeError(RecordError):
    pass


class RevisionDecodeError(RecordError):
    pass


# --------- Validation ----------
class ValidationError(RecordError):
    pass


class InvalidSignatureV1(ValidationError):
    def __init__(self, msg: str = "invalid IPNS signature (v1)"):
        super().__init__(msg)


class InvalidSignatureV2(ValidationError):
    def __init__(self, msg: str = "invalid IPNS signature (v2)"):
        super().__init__(msg)


class SignatureDataMismatch(ValidationError):
    def __init__(self, msg: str = "IPNS v2 signature data does not match entry fields"):
        super().__init__(msg)


class InvalidUtf8(ValidationError):
    pass


class InvalidDateString(ValidationError):
    pass
