"""Evidence acquisition: every network call the probes need, never raising."""

import socket
import ssl
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Union
from urllib.parse import urlsplit

import httpx

from sitehealth.core.config import Config
from sitehealth.core.models import (
    Absent, CertEvidence, GradeEvidence, HeaderEvidence, HtmlEvidence,
    StatusEvidence, Target, TextEvidence, UrlEvidence,
)


def normalize_url(url: str) -> str:
    """Strip whitespace and default a missing scheme to https."""
    url = (url or "").strip()
    if url and "://" not in url:
        url = f"https://{url}"
    return url


def build_target(url: str, resolved: str, reachable: bool = True) -> Target:
    parts = urlsplit(resolved)
    return Target(
        url=url,
        resolved_url=resolved,
        hostname=parts.hostname or "",
        scheme=parts.scheme or "https",
        reachable=reachable,
        netloc=parts.netloc.rpartition("@")[2],
    )


class Fetcher:
    """
    Thin wrapper around one httpx.Client.

    Each method returns an Evidence object or Absent; network errors,
    timeouts and HTTP error statuses are absorbed here.
    """

    def __init__(self, config: Optional[Config] = None, logger=None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.config = config or Config()
        self.logger = logger
        self.client = httpx.Client(
            verify=self.config.verify_tls,
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
            transport=transport,
        )

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ── HTTP ───────────────────────────────────────────────────

    def _request(self, method: str, url: str, follow_redirects: bool = True,
                 **kwargs) -> Union[httpx.Response, Absent]:
        if self.logger:
            self.logger.debug(f"→ {method} {url}")
        try:
            return self.client.request(method, url, follow_redirects=follow_redirects, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            if self.logger:
                self.logger.warn(f"{method} {url} failed: {exc}")
            return Absent(f"{type(exc).__name__}: {exc}")

    def _get_ok(self, url: str) -> Union[httpx.Response, Absent]:
        resp = self._request("GET", url)
        if isinstance(resp, Absent):
            return resp
        if resp.is_error:
            if self.logger:
                self.logger.warn(f"GET {url} returned HTTP {resp.status_code}")
            return Absent(f"HTTP {resp.status_code}")
        return resp

    def resolve_target(self, url: str) -> Target:
        """Follow redirects once; the resolved URL is reused by every probe."""
        url = normalize_url(url)
        resp = self._request("HEAD", url)
        if isinstance(resp, Absent):
            resolved, reachable = url, False
        else:
            resolved, reachable = str(resp.url), True
        target = build_target(url, resolved, reachable)
        if self.logger:
            self.logger.info(f"Target {url} resolved to {resolved}"
                             + ("" if reachable else " (unreachable)"))
        return target

    def fetch_headers(self, url: str) -> Union[HeaderEvidence, Absent]:
        resp = self._request("HEAD", url)
        if isinstance(resp, Absent):
            return resp
        headers: Dict[str, List[str]] = {}
        for name, value in resp.headers.multi_items():
            headers.setdefault(name.lower(), []).append(value)
        return HeaderEvidence(url=str(resp.url), status_code=resp.status_code, headers=headers)

    def fetch_status(self, url: str, method: str = "HEAD",
                     follow_redirects: bool = False) -> Union[StatusEvidence, Absent]:
        resp = self._request(method, url, follow_redirects=follow_redirects)
        if isinstance(resp, Absent):
            return resp
        return StatusEvidence(url=url, status_code=resp.status_code)

    def fetch_html(self, url: str) -> Union[HtmlEvidence, Absent]:
        resp = self._get_ok(url)
        if isinstance(resp, Absent):
            return resp
        return HtmlEvidence(url=str(resp.url), html=resp.text)

    def fetch_text(self, url: str) -> Union[TextEvidence, Absent]:
        resp = self._get_ok(url)
        if isinstance(resp, Absent):
            return resp
        return TextEvidence(url=str(resp.url), text=resp.text)

    def final_url(self, url: str) -> Union[UrlEvidence, Absent]:
        resp = self._get_ok(url)
        if isinstance(resp, Absent):
            return resp
        return UrlEvidence(requested=url, final_url=str(resp.url))

    # ── TLS ────────────────────────────────────────────────────

    def certificate(self, hostname: str, port: Optional[int] = None) -> Union[CertEvidence, Absent]:
        """Handshake with SNI and read the peer certificate's notAfter."""
        port = port or self.config.tls_port
        if self.logger:
            self.logger.debug(f"→ TLS {hostname}:{port}")
        try:
            ctx = ssl.create_default_context()
            with socket.create_connection((hostname, port), timeout=self.config.tls_timeout) as sock:
                with ctx.wrap_socket(sock, server_hostname=hostname) as ssock:
                    cert = ssock.getpeercert()
        except (OSError, ssl.SSLError, ValueError) as exc:
            if self.logger:
                self.logger.warn(f"TLS handshake with {hostname} failed: {exc}")
            return Absent(f"{type(exc).__name__}: {exc}")

        not_after = (cert or {}).get("notAfter")
        if not not_after:
            return Absent("no peer certificate")
        try:
            valid_to = datetime.fromtimestamp(ssl.cert_time_to_seconds(not_after), tz=timezone.utc)
        except ValueError:
            return Absent(f"unparseable notAfter {not_after!r}")
        return CertEvidence(hostname=hostname, valid_to=valid_to)

    # ── Grading service ────────────────────────────────────────

    def poll_grade(self, hostname: str,
                   sleep: Callable[[float], None] = time.sleep,
                   clock: Callable[[], float] = time.monotonic) -> Union[GradeEvidence, Absent]:
        """
        Poll the grading service until it reports Ready or the budget runs out.

        A failed request or an ERROR status from the service ends the poll.
        """
        cfg = self.config
        start = clock()
        while clock() - start < cfg.grade_poll_budget:
            resp = self._request("GET", cfg.grading_api_url, params={"host": hostname},
                                 timeout=cfg.timeout)
            if isinstance(resp, Absent):
                return resp
            try:
                data = resp.json()
            except ValueError:
                return Absent("grading service returned invalid JSON")
            if not isinstance(data, dict):
                return Absent("grading service returned an unexpected payload")

            if data.get("status") == "ERROR":
                return Absent(data.get("statusMessage") or "grading service error")

            endpoints = data.get("endpoints") or []
            ep = endpoints[0] if endpoints else {}
            if ep.get("statusMessage") == "Ready":
                return GradeEvidence(hostname=hostname, grade=ep.get("grade") or "")

            if self.logger:
                self.logger.debug(f"Grade for {hostname} not ready ({data.get('status')}), "
                                  f"retrying in {cfg.grade_poll_interval}s")
            sleep(cfg.grade_poll_interval)

        return Absent(f"grade not ready within {cfg.grade_poll_budget:.0f}s")
