"""SSL/TLS probe: certificate validity plus the grading service's letter grade."""

import time
from datetime import datetime, timezone
from typing import Callable, List

from sitehealth.checkers.base import Diagnostic, SecurityProbe
from sitehealth.core.fetch import Fetcher
from sitehealth.core.models import Absent, Target, Verdict


class TLSConfiguration(SecurityProbe):

    name = "SSL/TLS Configuration"
    diagnostics = [
        Diagnostic(
            title="SSL/TLS Configuration is proper.",
            group="Connection Security",
            weight=20,
            description=(
                "Your website's SSL/TLS configuration is properly implemented. This ensures "
                "that all data transmitted between your server and visitors is encrypted, "
                "protecting sensitive information from interception or tampering during transit."
            ),
            fail="SSL/TLS configuration is insecure or incomplete.",
        ),
    ]

    def __init__(self, logger=None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic,
                 now: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        super().__init__(logger)
        self.sleep = sleep
        self.clock = clock
        self.now = now

    def probe(self, target: Target, fetcher: Fetcher) -> List[Verdict]:
        if target.scheme != "https":
            return self.verdicts(False, detail="The site is not served over HTTPS.")

        cert = fetcher.certificate(target.hostname, target.port)
        if isinstance(cert, Absent):
            return self.verdicts(False, detail=f"No valid certificate could be read ({cert.reason}).")
        if cert.valid_to <= self.now():
            return self.verdicts(False, raw_value={"valid_to": cert.valid_to.isoformat()},
                                 detail=f"The certificate expired on {cert.valid_to:%Y-%m-%d}.")

        if self.logger:
            self.logger.info(f"Certificate for {target.hostname} valid until "
                             f"{cert.valid_to:%Y-%m-%d}, waiting for TLS grade")

        grade = fetcher.poll_grade(target.hostname, sleep=self.sleep, clock=self.clock)
        raw = {"valid_to": cert.valid_to.isoformat()}
        if isinstance(grade, Absent):
            return self.verdicts(False, raw_value=raw,
                                 detail=f"No TLS grade was available ({grade.reason}).")

        raw["grade"] = grade.grade
        passed = grade.grade in fetcher.config.passing_grades
        return self.verdicts(passed, raw_value=raw,
                             detail="" if passed else f"The TLS configuration was graded {grade.grade or 'unknown'}.")
