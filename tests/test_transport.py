import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
import requests

from w3name.errors import InvalidSignatureV2
from w3name.ipns import revision_to_ipns_entry, serialize_ipns_entry
from w3name.name import WritableName
from w3name.revision import Revision
from w3name.transport import (
    APIError,
    NameNotFound,
    NetworkError,
    TokenBucket,
    UnexpectedAPIResponse,
    W3NameClient,
    client_factory,
)

# CMD Line Usage: pytest -v -s --log-cli-level=DEBUG tests/test_transport.py


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse()
        self.exc = exc
        self.calls = []

    def _send(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.exc:
            raise self.exc
        return self.response

    def get(self, url, **kwargs):
        return self._send("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._send("POST", url, **kwargs)

    def close(self):
        pass


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def _client(session):
    return W3NameClient("https://names.example/", session=session)


def _record(writable, value="hello", sequence=0):
    rev = Revision(writable.to_name(), value, sequence,
                   datetime.now(timezone.utc) + timedelta(days=1))
    entry = revision_to_ipns_entry(rev, writable)
    return rev, base64.b64encode(serialize_ipns_entry(entry)).decode()


def test_resolve():
    writable = WritableName.new()
    rev, record = _record(writable, "hello", 5)
    session = FakeSession(FakeResponse(200, {"record": record}))

    got = _client(session).resolve(writable.to_name())

    assert got == rev
    method, url, kwargs = session.calls[0]
    assert method == "GET"
    assert url == f"https://names.example/name/{writable}"
    assert kwargs["timeout"] == 10


def test_resolve_not_found():
    session = FakeSession(FakeResponse(404, {"message": "not found"}))
    with pytest.raises(NameNotFound) as exc:
        _client(session).resolve(WritableName.new().to_name())
    assert exc.value.status == 404


def test_resolve_not_found_without_envelope():
    session = FakeSession(FakeResponse(404, None, text="Not Found"))
    with pytest.raises(NameNotFound):
        _client(session).resolve(WritableName.new().to_name())


def test_resolve_api_error():
    session = FakeSession(FakeResponse(500, {"message": "boom"}))
    with pytest.raises(APIError) as exc:
        _client(session).resolve(WritableName.new().to_name())
    assert not isinstance(exc.value, NameNotFound)
    assert exc.value.message == "boom"
    assert exc.value.status == 500


def test_resolve_unexpected_error_body():
    session = FakeSession(FakeResponse(502, None, text="<html>bad gateway</html>"))
    with pytest.raises(UnexpectedAPIResponse):
        _client(session).resolve(WritableName.new().to_name())


@pytest.mark.parametrize("body", [None, {"nope": 1}, {"record": 12}, {"record": "!!not base64!!"}])
def test_resolve_unexpected_success_body(body):
    session = FakeSession(FakeResponse(200, body, text="?"))
    with pytest.raises(UnexpectedAPIResponse):
        _client(session).resolve(WritableName.new().to_name())


def test_resolve_network_failure():
    session = FakeSession(exc=requests.ConnectionError("refused"))
    with pytest.raises(NetworkError):
        _client(session).resolve(WritableName.new().to_name())


def test_resolve_record_from_other_key_rejected():
    _, record = _record(WritableName.new())
    session = FakeSession(FakeResponse(200, {"record": record}))
    with pytest.raises(InvalidSignatureV2):
        _client(session).resolve(WritableName.new().to_name())


def test_publish():
    writable = WritableName.new()
    rev = Revision.v0(writable.to_name(), "published")
    session = FakeSession(FakeResponse(202, {}))

    _client(session).publish(writable, rev)

    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == f"https://names.example/name/{writable}"

    # the posted body is what resolve would accept back
    resolver = _client(FakeSession(FakeResponse(200, {"record": kwargs["data"]})))
    assert resolver.resolve(writable.to_name()) == rev


def test_publish_api_error(caplog):
    writable = WritableName.new()
    session = FakeSession(FakeResponse(400, {"message": "invalid sequence"}))
    with pytest.raises(APIError) as exc:
        _client(session).publish(writable, Revision.v0(writable.to_name(), "v"))
    assert exc.value.message == "invalid sequence"
    assert "invalid sequence" in caplog.text


def test_requests_go_through_limiter():
    class CountingLimiter:
        calls = 0

        def acquire(self):
            self.calls += 1

    limiter = CountingLimiter()
    writable = WritableName.new()
    _, record = _record(writable)
    client = W3NameClient(session=FakeSession(FakeResponse(200, {"record": record})), limiter=limiter)
    client.resolve(writable.to_name())
    client.resolve(writable.to_name())
    assert limiter.calls == 2


def test_token_bucket_blocks_when_empty():
    clock = FakeClock()
    bucket = TokenBucket(rate=2, clock=clock, sleep=clock.sleep)

    bucket.acquire()
    bucket.acquire()
    assert clock.sleeps == []

    bucket.acquire()
    assert clock.sleeps == [pytest.approx(0.5)]


def test_token_bucket_refills():
    clock = FakeClock()
    bucket = TokenBucket(rate=30, clock=clock, sleep=clock.sleep)
    for _ in range(30):
        assert bucket.try_acquire()
    assert not bucket.try_acquire()

    clock.now += 0.1
    assert [bucket.try_acquire() for _ in range(4)] == [True, True, True, False]


def test_token_bucket_rejects_bad_rate():
    with pytest.raises(ValueError):
        TokenBucket(rate=0)


def test_token_bucket_slower_than_one_per_second():
    clock = FakeClock()
    bucket = TokenBucket(rate=0.5, clock=clock, sleep=clock.sleep)
    assert bucket.capacity == 1

    bucket.acquire()
    assert clock.sleeps == []

    bucket.acquire()
    assert clock.sleeps == [pytest.approx(2.0)]


def test_token_bucket_rejects_fractional_capacity():
    with pytest.raises(ValueError):
        TokenBucket(rate=5, capacity=0.5)


def test_client_factory_fractional_rate(monkeypatch):
    monkeypatch.setenv("W3NAME_RATE_LIMIT", "0.5")
    client = client_factory()
    assert client.limiter.rate == 0.5
    assert client.limiter.try_acquire()


def test_client_factory(monkeypatch):
    monkeypatch.delenv("W3NAME_ENDPOINT", raising=False)
    monkeypatch.delenv("W3NAME_RATE_LIMIT", raising=False)
    client = client_factory()
    assert isinstance(client, W3NameClient)
    assert client.base_url == "https://name.web3.storage"
    assert client.limiter.rate == 30

    monkeypatch.setenv("W3NAME_ENDPOINT", "http://localhost:8787/")
    monkeypatch.setenv("W3NAME_RATE_LIMIT", "5")
    monkeypatch.setenv("W3NAME_TIMEOUT", "2.5")
    client = client_factory()
    assert client.base_url == "http://localhost:8787"
    assert client.limiter.rate == 5
    assert client.timeout == 2.5
