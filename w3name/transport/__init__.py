# w3name/transport/__init__.py
import os
from w3name.constants import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, RATE_LIMIT_REQUESTS
from w3name.transport.ratelimit import TokenBucket
from w3name.transport.transport_base import (
    APIError,
    BaseTransport,
    NameNotFound,
    NetworkError,
    TransportError,
    UnexpectedAPIResponse,
)
from w3name.transport.transport_http import W3NameClient


def client_factory() -> BaseTransport:
    """
    Build the naming-service client from the environment:
      - W3NAME_ENDPOINT   → service base URL
      - W3NAME_RATE_LIMIT → requests per second
      - W3NAME_TIMEOUT    → per-request timeout in seconds
    """
    return W3NameClient(
        os.getenv("W3NAME_ENDPOINT", DEFAULT_ENDPOINT),
        rate_limit=float(os.getenv("W3NAME_RATE_LIMIT", RATE_LIMIT_REQUESTS)),
        timeout=float(os.getenv("W3NAME_TIMEOUT", DEFAULT_TIMEOUT)),
    )


__all__ = [
    "APIError",
    "BaseTransport",
    "NameNotFound",
    "NetworkError",
    "TokenBucket",
    "TransportError",
    "UnexpectedAPIResponse",
    "W3NameClient",
    "client_factory",
]
