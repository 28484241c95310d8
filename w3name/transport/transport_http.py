# w3name/transport/transport_http.py
from typing import Optional

import requests

from w3name.constants import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, RATE_LIMIT_REQUESTS
from w3name.ipns import revision_to_ipns_entry, serialize_ipns_entry, verify_and_decode
from w3name.logger import get_logger
from w3name.name import Name, WritableName
from w3name.revision import Revision
from w3name.transport.ratelimit import TokenBucket
from w3name.transport.transport_base import (
    APIError,
    BaseTransport,
    NameNotFound,
    NetworkError,
    TransportError,
    UnexpectedAPIResponse,
)
from w3name.utils import b64d, b64e

log = get_logger("w3name.transport.http")


class W3NameClient(BaseTransport):
    """
    HTTP client for the w3name service.

    - GET  /name/{name} → {"record": <base64 IPNS entry>}
    - POST /name/{name} with the base64 IPNS entry as the body

    Every request first takes a token from the client's rate limiter, so one
    client instance never exceeds `rate_limit` requests per second.
    """
    def __init__(
        self,
        base_url: str = DEFAULT_ENDPOINT,
        rate_limit: float = RATE_LIMIT_REQUESTS,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        limiter: Optional[TokenBucket] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()
        self.limiter = limiter or TokenBucket(rate_limit)

    def _url(self, name) -> str:
        return f"{self.base_url}/name/{name}"

    # ------------------------------------------------------------------
    # Resolve
    # ------------------------------------------------------------------
    def resolve(self, name: Name) -> Revision:
        """Fetch, verify and decode the latest record for `name`."""
        url = self._url(name)
        self.limiter.acquire()
        log.debug(f"[HTTP GET] → {url}")
        try:
            res = self.http.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning(f"[HTTP GET] {url} failed: {e}")
            raise NetworkError(str(e)) from e

        if not res.ok:
            raise self._error_from_response(res)

        try:
            body = res.json()
        except ValueError as e:
            raise UnexpectedAPIResponse(f"resolve response is not JSON: {e}", res.status_code) from e
        record = body.get("record") if isinstance(body, dict) else None
        if not isinstance(record, str):
            raise UnexpectedAPIResponse("resolve response has no record", res.status_code)
        try:
            entry_bytes = b64d(record)
        except ValueError as e:
            raise UnexpectedAPIResponse(f"record is not valid base64: {e}", res.status_code) from e

        return verify_and_decode(entry_bytes, name)

    # ------------------------------------------------------------------
    # Publish
    # ------------------------------------------------------------------
    def publish(self, writable: WritableName, revision: Revision) -> None:
        """Sign `revision` with `writable` and publish it."""
        url = self._url(writable)
        entry = revision_to_ipns_entry(revision, writable)
        body = b64e(serialize_ipns_entry(entry))

        self.limiter.acquire()
        log.debug(f"[HTTP POST] → {url} | seq={revision.sequence} bytes={len(body)}")
        try:
            res = self.http.post(url, data=body, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning(f"[HTTP POST] {url} failed: {e}")
            raise NetworkError(str(e)) from e

        if not res.ok:
            raise self._error_from_response(res)
        log.info(f"[HTTP POST] published {writable} seq={revision.sequence}")

    @staticmethod
    def _error_from_response(res) -> TransportError:
        try:
            body = res.json()
        except ValueError:
            body = None
        message = body.get("message") if isinstance(body, dict) else None
        if not isinstance(message, str):
            message = None

        log.warning(f"[HTTP] {res.status_code}: {message or res.text}")
        if res.status_code == 404:
            return NameNotFound(message or "name not found", res.status_code)
        if message is None:
            return UnexpectedAPIResponse(status=res.status_code)
        return APIError(message, res.status_code)

    def close(self) -> None:
        self.http.close()
