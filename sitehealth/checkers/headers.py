"""HTTP security header probe (HSTS, X-Frame-Options, X-XSS-Protection)."""

import re
from typing import List

from sitehealth.checkers.base import Diagnostic, SecurityProbe
from sitehealth.core.fetch import Fetcher
from sitehealth.core.models import Absent, Target, Verdict


HSTS_MIN_AGE = 31536000
_FRAME_OPTIONS = {"SAMEORIGIN", "DENY"}
_MAX_AGE_RX = re.compile(r"max-age=(\d+)", re.I)


def hsts_ok(values: List[str]) -> bool:
    for value in values:
        m = _MAX_AGE_RX.search(value)
        if m and int(m.group(1)) >= HSTS_MIN_AGE:
            return True
    return False


def frame_options_ok(values: List[str]) -> bool:
    # Repeated X-Frame-Options headers are ambiguous to browsers.
    return len(values) == 1 and values[0].strip() in _FRAME_OPTIONS


def xss_protection_ok(values: List[str]) -> bool:
    return len(values) == 1 and "1; mode=block" in values[0]


class SecurityHeaders(SecurityProbe):

    name = "HTTP Security Headers"
    diagnostics = [
        Diagnostic(
            title="Strict Transport Security, X-Frame-Options and X-XSS-Protection are set.",
            group="HTTP Security Headers",
            weight=20,
            description=(
                "Your website enforces HTTPS through Strict Transport Security, sets "
                "X-Frame-Options to SAMEORIGIN or DENY and enables X-XSS-Protection with "
                "mode=block. Together these prevent protocol downgrades, clickjacking and "
                "reflected cross-site scripting in supported browsers."
            ),
            fail="HTTP security headers are missing or misconfigured.",
        ),
    ]

    def probe(self, target: Target, fetcher: Fetcher) -> List[Verdict]:
        evidence = fetcher.fetch_headers(target.resolved_url)
        if isinstance(evidence, Absent):
            return self.verdicts(False, detail=f"Headers could not be fetched ({evidence.reason}).")

        checks = {
            "Strict-Transport-Security": hsts_ok(evidence.values("strict-transport-security")),
            "X-Frame-Options": frame_options_ok(evidence.values("x-frame-options")),
            "X-XSS-Protection": xss_protection_ok(evidence.values("x-xss-protection")),
        }
        missing = [name for name, ok in checks.items() if not ok]
        if self.logger:
            for name, ok in checks.items():
                self.logger.debug(f"  {name}: {'ok' if ok else 'missing/misconfigured'}")

        detail = f"Missing or misconfigured: {', '.join(missing)}." if missing else ""
        return self.verdicts(not missing, raw_value=checks, detail=detail)
