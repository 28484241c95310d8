# w3name/constants.py
from datetime import timedelta

# multicodec code for "libp2p-key"
LIBP2P_KEY_CODEC = 0x72
LIBP2P_KEY_CODEC_NAME = "libp2p-key"
IDENTITY_HASH = "identity"
NAME_BASE = "base36"

# libp2p KeyType enum (crypto.proto); only Ed25519 is supported
KEY_TYPE_ED25519 = 1

# IPNS
VALIDITY_TYPE_EOL = 0
V1_VALIDITY_TYPE_LITERAL = b"EOL"
V2_SIGNATURE_PREFIX = b"ipns-signature:"

DEFAULT_VALIDITY_PERIOD = timedelta(weeks=52)
MAX_UINT64 = 2**64 - 1
MAX_INT64 = 2**63 - 1
MIN_INT64 = -(2**63)

# HTTP service
DEFAULT_ENDPOINT = "https://name.web3.storage"
RATE_LIMIT_REQUESTS = 30
DEFAULT_TIMEOUT = 10
