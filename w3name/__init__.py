"""
w3name
======
Client library for the w3name naming service, an implementation of the IPNS
decentralized naming protocol.

Provides:
- Name / WritableName: name identifiers and their signing keys
- Revision: unsigned, versioned name record values
- w3name.ipns: signed IPNS entry construction and verification
- W3NameClient: rate-limited HTTP client for resolve and publish
"""

__version__ = "0.1.0"

from .name import Name, WritableName
from .revision import Revision
from .transport import W3NameClient

__all__ = ["Name", "WritableName", "Revision", "W3NameClient", "__version__"]
