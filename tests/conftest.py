"""
Pytest configuration and shared fixtures.

Network access is replaced by an httpx.MockTransport routing table and a
patched TLS handshake; sleeps and clocks are faked.
"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from sitehealth.core.config import Config
from sitehealth.core.fetch import Fetcher
from sitehealth.core.models import Absent, CertEvidence


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "security: security probe set tests"
    )
    config.addinivalue_line(
        "markers", "seo: SEO probe set tests"
    )


def response_factory(status=200, headers=None, text="", json=None):
    if json is not None:
        return lambda: httpx.Response(status, headers=headers, json=json)
    return lambda: httpx.Response(status, headers=headers, text=text)


class FakeSite:
    """
    Routing table for httpx.MockTransport, keyed on (method, host, port, path).

    A route is a response factory, an httpx exception class to raise, or a
    list of those served in order (the last one repeats). Unknown routes get 404.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, url, *, status=200, headers=None, text="", json=None, raises=None):
        self.routes[self.key(method, url)] = raises or response_factory(status, headers, text, json)
        return self

    @staticmethod
    def key(method, url):
        u = httpx.URL(url)
        return (method, u.host, u.port, u.path)

    def redirect(self, method, url, location, status=301):
        return self.add(method, url, status=status, headers={"Location": location})

    def html(self, url, body, method="GET"):
        return self.add(method, url, status=200,
                        headers={"Content-Type": "text/html; charset=utf-8"}, text=body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.method, str(request.url)))
        key = (request.method, request.url.host, request.url.port, request.url.path)
        route = self.routes.get(key)
        if route is None:
            route = self.routes.get(("*", request.url.host, request.url.port, request.url.path))
        if route is None:
            return httpx.Response(404)
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, type) and issubclass(route, Exception):
            raise route("simulated failure", request=request)
        return route()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def count(self, method, url) -> int:
        key = self.key(method, url)
        return sum(1 for m, u in self.calls if self.key(m, u) == key)


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def fetcher(site, config):
    f = Fetcher(config, transport=site.transport)
    yield f
    f.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def valid_cert(monkeypatch):
    expires = datetime.now(timezone.utc) + timedelta(days=90)

    def fake(self, hostname, port=None):
        return CertEvidence(hostname=hostname, valid_to=expires)

    monkeypatch.setattr(Fetcher, "certificate", fake)
    return expires


@pytest.fixture
def expired_cert(monkeypatch):
    expires = datetime.now(timezone.utc) - timedelta(days=1)

    def fake(self, hostname, port=None):
        return CertEvidence(hostname=hostname, valid_to=expires)

    monkeypatch.setattr(Fetcher, "certificate", fake)
    return expires


@pytest.fixture
def no_cert(monkeypatch):
    def fake(self, hostname, port=None):
        return Absent("connection refused")

    monkeypatch.setattr(Fetcher, "certificate", fake)


GRADING_URL = "https://api.ssllabs.com/api/v3/analyze"


def grade_payload(grade="A", ready=True):
    if not ready:
        return {"status": "IN_PROGRESS", "endpoints": [{"statusMessage": "In progress"}]}
    return {"status": "READY", "endpoints": [{"statusMessage": "Ready", "grade": grade}]}


@pytest.fixture
def secure_site(site):
    """A fully hardened https://example.com."""
    site.add("HEAD", "https://example.com/", headers={
        "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
        "X-Frame-Options": "DENY",
        "X-XSS-Protection": "1; mode=block",
    })
    site.add("HEAD", "https://example.com/wp-login.php", status=404)
    site.add("GET", "https://example.com/wp-config.php", status=403)
    site.add("GET", GRADING_URL, json=grade_payload("A+"))
    return site


@pytest.fixture
def grading(site):
    """Queue grading service answers: grading("A"), grading(None, "B") (None = not ready)."""
    def queue(*grades):
        site.routes[site.key("GET", GRADING_URL)] = [
            response_factory(json=grade_payload(g, ready=g is not None)) for g in grades
        ]
    return queue
