"""Security probe set: individual probes and the scored report."""

import threading

import httpx
import pytest

from sitehealth.checkers.base import SecurityProbe
from sitehealth.checkers.exposure import AdminExposure, SensitiveFileExposure
from sitehealth.checkers.headers import SecurityHeaders, frame_options_ok, hsts_ok, xss_protection_ok
from sitehealth.checkers.tls import TLSConfiguration
from sitehealth.core.engine import Engine
from sitehealth.core.fetch import Fetcher, build_target
from sitehealth.core.models import Absent, Status


pytestmark = pytest.mark.security

TARGET = build_target("https://example.com/", "https://example.com/")
ALL_TITLES = {
    "Strict Transport Security, X-Frame-Options and X-XSS-Protection are set.",
    "SSL/TLS Configuration is proper.",
    "Admin url is changed.",
    "Directory Indexing is not enabled.",
    "Sensitive files are not publicly accessible.",
}


def make_engine(site, clock):
    probes = [
        SecurityHeaders(),
        TLSConfiguration(sleep=clock.sleep, clock=clock),
        AdminExposure(),
        SensitiveFileExposure(),
    ]
    return Engine(transport=site.transport, security_probes=probes)


class TestHeaderRules:

    @pytest.mark.parametrize("values,expected", [
        (["max-age=31536000"], True),
        (["max-age=63072000; includeSubDomains; preload"], True),
        (["max-age=31535999"], False),
        (["max-age=0", "max-age=31536000"], True),
        ([], False),
    ])
    def test_hsts(self, values, expected):
        assert hsts_ok(values) is expected

    @pytest.mark.parametrize("values,expected", [
        (["DENY"], True),
        (["SAMEORIGIN"], True),
        (["sameorigin"], False),
        (["ALLOW-FROM https://a.example"], False),
        (["DENY", "DENY"], False),
        ([], False),
    ])
    def test_frame_options(self, values, expected):
        assert frame_options_ok(values) is expected

    @pytest.mark.parametrize("values,expected", [
        (["1; mode=block"], True),
        (["1"], False),
        (["0"], False),
        ([], False),
    ])
    def test_xss_protection(self, values, expected):
        assert xss_protection_ok(values) is expected


class TestSecurityHeaders:

    def test_all_three_required(self, site, fetcher):
        site.add("HEAD", "https://example.com/", headers={
            "Strict-Transport-Security": "max-age=31536000",
            "X-Frame-Options": "SAMEORIGIN",
        })
        [v] = SecurityHeaders().probe(TARGET, fetcher)
        assert v.status is Status.FAIL
        assert v.weight == 20
        assert v.raw_value == {
            "Strict-Transport-Security": True,
            "X-Frame-Options": True,
            "X-XSS-Protection": False,
        }
        assert "X-XSS-Protection" in v.description

    def test_acquisition_failure_fails(self, site, fetcher):
        site.add("HEAD", "https://example.com/", raises=httpx.ConnectTimeout)
        [v] = SecurityHeaders().probe(TARGET, fetcher)
        assert v.status is Status.FAIL


class TestTLSConfiguration:

    def test_plain_http_fails_without_handshake(self, fetcher, clock, monkeypatch):
        def boom(*a, **kw):
            raise AssertionError("no handshake expected")
        monkeypatch.setattr(fetcher, "certificate", boom)
        target = build_target("http://example.com/", "http://example.com/")
        [v] = TLSConfiguration(sleep=clock.sleep, clock=clock).probe(target, fetcher)
        assert v.status is Status.FAIL

    def test_missing_certificate(self, fetcher, clock, no_cert):
        [v] = TLSConfiguration(sleep=clock.sleep, clock=clock).probe(TARGET, fetcher)
        assert v.status is Status.FAIL
        assert "connection refused" in v.description

    def test_expired_certificate_skips_grading(self, site, fetcher, clock, expired_cert, grading):
        grading("A+")
        [v] = TLSConfiguration(sleep=clock.sleep, clock=clock).probe(TARGET, fetcher)
        assert v.status is Status.FAIL
        assert site.count("GET", "https://api.ssllabs.com/api/v3/analyze") == 0

    @pytest.mark.parametrize("grade,expected", [
        ("A+", Status.PASS), ("A", Status.PASS), ("B", Status.PASS),
        ("A-", Status.FAIL), ("C", Status.FAIL), ("T", Status.FAIL),
    ])
    def test_grades(self, fetcher, clock, valid_cert, grading, grade, expected):
        grading(grade)
        [v] = TLSConfiguration(sleep=clock.sleep, clock=clock).probe(TARGET, fetcher)
        assert v.status is expected
        assert v.raw_value["grade"] == grade

    def test_grade_never_ready(self, fetcher, clock, valid_cert, grading):
        grading(None)
        [v] = TLSConfiguration(sleep=clock.sleep, clock=clock).probe(TARGET, fetcher)
        assert v.status is Status.FAIL
        assert clock.now >= 100


class TestExposure:

    @pytest.mark.parametrize("status,expected", [
        (200, Status.FAIL), (404, Status.PASS), (403, Status.PASS), (302, Status.PASS),
    ])
    def test_admin_status(self, site, fetcher, status, expected):
        site.add("HEAD", "https://example.com/wp-login.php", status=status)
        [v] = AdminExposure().probe(TARGET, fetcher)
        assert v.status is expected

    def test_admin_connection_refused_passes(self, site, fetcher):
        site.add("HEAD", "https://example.com/wp-login.php", raises=httpx.ConnectError)
        [v] = AdminExposure().probe(TARGET, fetcher)
        assert v.status is Status.PASS

    @pytest.mark.parametrize("status,expected", [
        (200, Status.FAIL), (302, Status.FAIL), (301, Status.PASS), (404, Status.PASS),
    ])
    def test_sensitive_file_emits_two_verdicts(self, site, fetcher, status, expected):
        site.add("GET", "https://example.com/wp-config.php", status=status)
        verdicts = SensitiveFileExposure().probe(TARGET, fetcher)
        assert [v.title for v in verdicts] == [
            "Directory Indexing is not enabled.",
            "Sensitive files are not publicly accessible.",
        ]
        assert all(v.status is expected for v in verdicts)
        assert sum(v.weight for v in verdicts) == 40

    def test_sensitive_file_timeout_passes(self, site, fetcher):
        site.add("GET", "https://example.com/wp-config.php", raises=httpx.ReadTimeout)
        verdicts = SensitiveFileExposure().probe(TARGET, fetcher)
        assert all(v.status is Status.PASS for v in verdicts)

    def test_unreachable_target_fails(self, fetcher):
        target = build_target("https://example.com/", "https://example.com/", reachable=False)
        verdicts = AdminExposure().probe(target, fetcher) + SensitiveFileExposure().probe(target, fetcher)
        assert all(v.status is Status.FAIL for v in verdicts)
        assert all("could not be completed" in v.description for v in verdicts)

    def test_non_default_port_is_probed(self, site, fetcher):
        target = build_target("http://example.com:8080/", "http://example.com:8080/")
        site.add("HEAD", "http://example.com:8080/wp-login.php", status=200)
        site.add("GET", "http://example.com:8080/wp-config.php", status=200)

        verdicts = AdminExposure().probe(target, fetcher) + SensitiveFileExposure().probe(target, fetcher)

        assert all(v.status is Status.FAIL for v in verdicts)
        assert site.count("HEAD", "http://example.com/wp-login.php") == 0
        assert site.count("GET", "http://example.com/wp-config.php") == 0


class TestTLSPort:

    def test_handshake_uses_target_port(self, fetcher, clock, grading, monkeypatch):
        seen = []

        def record(self, hostname, port=None):
            seen.append((hostname, port))
            return Absent("refused")

        monkeypatch.setattr(Fetcher, "certificate", record)
        target = build_target("https://example.com:8443/", "https://example.com:8443/")

        TLSConfiguration(sleep=clock.sleep, clock=clock).probe(target, fetcher)

        assert seen == [("example.com", 8443)]


class TestSecurityReport:

    def test_hardened_site_scores_100(self, secure_site, clock, valid_cert):
        result = make_engine(secure_site, clock).run_security("https://example.com")
        assert result["score"] == 100
        assert result["failed"] == []
        assert {item["title"] for item in result["passed"]} == ALL_TITLES
        assert result["grade"] == "A+"
        assert result["rating"] == "Excellent"

    def test_target_resolved_once_and_reused(self, site, clock, valid_cert, grading):
        site.redirect("HEAD", "http://example.com/", "https://www.example.com/")
        site.add("HEAD", "https://www.example.com/")
        grading("A")
        make_engine(site, clock).run_security("http://example.com")
        assert site.count("HEAD", "https://www.example.com/wp-login.php") == 1
        assert site.count("GET", "https://www.example.com/wp-config.php") == 1
        assert site.count("HEAD", "http://example.com/wp-login.php") == 0

    def test_no_https_caps_score_at_80(self, site, clock, valid_cert):
        site.add("HEAD", "http://example.com/", headers={
            "Strict-Transport-Security": "max-age=31536000",
            "X-Frame-Options": "DENY",
            "X-XSS-Protection": "1; mode=block",
        })
        result = make_engine(site, clock).run_security("http://example.com")
        assert result["score"] == 80
        assert [item["title"] for item in result["failed"]] == ["SSL/TLS Configuration is proper."]

    def test_every_request_timing_out(self, site, clock, no_cert):
        for method in ("HEAD", "GET"):
            for path in ("/", "/wp-login.php", "/wp-config.php"):
                site.add(method, f"https://example.com{path}", raises=httpx.ConnectTimeout)
        result = make_engine(site, clock).run_security("https://example.com")
        assert result["passed"] == []
        assert len(result["failed"]) == 5
        assert result["score"] == 0
        assert result["grade"] == "F"

    def test_unexpected_error_yields_all_failed_report(self, secure_site, clock, valid_cert):
        class Broken(SecurityProbe):
            name = "Broken"

            def probe(self, target, fetcher):
                raise RuntimeError("boom")

        engine = make_engine(secure_site, clock)
        engine.security_probes.append(Broken())
        result = engine.run_security("https://example.com")

        assert result["score"] == 0
        assert result["passed"] == []
        assert {item["title"] for item in result["failed"]} == ALL_TITLES
        assert all("could not be completed" in item["description"] for item in result["failed"])
        assert all(item["status"] == "Needs Attention" for item in result["failed"])
        assert "boom" not in str(result)

    def test_header_breakdown_is_reported(self, site, clock, valid_cert, grading):
        site.add("HEAD", "https://example.com/", headers={
            "Strict-Transport-Security": "max-age=31536000",
            "X-XSS-Protection": "1; mode=block",
        })
        grading("A")

        result = make_engine(site, clock).run_security("https://example.com")

        [item] = [i for i in result["failed"] if i["group"] == "HTTP Security Headers"]
        assert item["details"] == {
            "Strict-Transport-Security": True,
            "X-Frame-Options": False,
            "X-XSS-Protection": True,
        }
        assert "X-Frame-Options" in item["description"]

    def test_slow_grade_poll_does_not_block_other_probes(self, site, clock, valid_cert):
        others_done = threading.Event()
        released = []
        seen = set()
        lock = threading.Lock()
        head_calls = []

        def mark(name):
            with lock:
                seen.add(name)
                if seen >= {"headers", "admin", "config"}:
                    others_done.set()

        def home():
            # the first HEAD resolves the target, the second is the header probe
            head_calls.append(1)
            if len(head_calls) > 1:
                mark("headers")
            return httpx.Response(200, headers={
                "Strict-Transport-Security": "max-age=31536000",
                "X-Frame-Options": "DENY",
                "X-XSS-Protection": "1; mode=block",
            })

        def admin():
            mark("admin")
            return httpx.Response(404)

        def config_file():
            mark("config")
            return httpx.Response(403)

        def grade():
            released.append(others_done.wait(timeout=5))
            return httpx.Response(200, json={
                "status": "READY", "endpoints": [{"statusMessage": "Ready", "grade": "A"}]})

        site.routes[site.key("HEAD", "https://example.com/")] = home
        site.routes[site.key("HEAD", "https://example.com/wp-login.php")] = admin
        site.routes[site.key("GET", "https://example.com/wp-config.php")] = config_file
        site.routes[site.key("GET", "https://api.ssllabs.com/api/v3/analyze")] = grade

        result = make_engine(site, clock).run_security("https://example.com")

        assert released == [True]
        assert result["score"] == 100

    def test_explicit_empty_probe_list_is_kept(self, site):
        site.add("HEAD", "https://example.com/")
        engine = Engine(transport=site.transport, security_probes=[], seo_checks=[])

        assert engine.security_probes == []
        assert engine.seo_checks == []
        result = engine.run_security("https://example.com")
        assert result["passed"] == [] and result["failed"] == []
        assert result["score"] == 0
        assert site.count("HEAD", "https://example.com/wp-login.php") == 0
        assert engine.run_seo("https://example.com") == {"basic": {}, "advanced": {}}
