from __future__ import annotations
from typing import Optional

from w3name.errors import W3NameError
from w3name.name import Name, WritableName
from w3name.revision import Revision


class TransportError(W3NameError):
    pass


class NetworkError(TransportError):
    pass


class UnexpectedAPIResponse(TransportError):
    def __init__(self, msg: str = "unexpected response from API, unable to parse error message",
                 status: Optional[int] = None):
        super().__init__(msg)
        self.status = status


class APIError(TransportError):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(f"api error: {message}")
        self.message = message
        self.status = status


class NameNotFound(APIError):
    """No record has been published for the name yet."""


class BaseTransport:
    """
    Contract between the name-record codec and a naming service.

    Records cross the boundary as Revisions; signing, serialization and
    verification happen inside the transport using w3name.ipns.
    """
    def resolve(self, name: Name) -> Revision:
        raise NotImplementedError

    def publish(self, writable: WritableName, revision: Revision) -> None:
        raise NotImplementedError

    def close(self) -> None:
        return
