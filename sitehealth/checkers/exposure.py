"""
Endpoint exposure probes for the default admin login and a sensitive config file.

Both read a failed request as "not exposed" as long as the target itself
answered the resolving request. An unreachable target fails them instead.
"""

from abc import abstractmethod
from typing import List

from sitehealth.checkers.base import Diagnostic, SecurityProbe
from sitehealth.core.fetch import Fetcher
from sitehealth.core.models import Absent, Target, Verdict


class _ExposureProbe(SecurityProbe):

    method = "HEAD"
    exposed_statuses = frozenset({200})

    @abstractmethod
    def endpoint(self, target: Target, fetcher: Fetcher) -> str:
        ...

    def probe(self, target: Target, fetcher: Fetcher) -> List[Verdict]:
        if not target.reachable:
            return self.fallback()

        url = self.endpoint(target, fetcher)
        evidence = fetcher.fetch_status(url, method=self.method, follow_redirects=False)
        if isinstance(evidence, Absent):
            if self.logger:
                self.logger.debug(f"{url} unreachable, treating as not exposed")
            return self.verdicts(True, raw_value={"url": url, "status_code": None})

        exposed = evidence.status_code in self.exposed_statuses
        return self.verdicts(not exposed,
                             raw_value={"url": url, "status_code": evidence.status_code},
                             detail=f"{url} answered HTTP {evidence.status_code}." if exposed else "")


class AdminExposure(_ExposureProbe):

    name = "Admin URL"
    method = "HEAD"
    diagnostics = [
        Diagnostic(
            title="Admin url is changed.",
            group="Access Control",
            weight=20,
            description=(
                "Your administrative access URL has been changed from the default. This is an "
                "important security practice that makes it significantly harder for attackers "
                "to find and attempt to access your site's admin area."
            ),
            fail="Admin URL uses a default or guessable value.",
        ),
    ]

    def endpoint(self, target: Target, fetcher: Fetcher) -> str:
        return target.origin + fetcher.config.admin_path


class SensitiveFileExposure(_ExposureProbe):

    name = "Sensitive Files"
    method = "GET"
    exposed_statuses = frozenset({200, 302})
    diagnostics = [
        Diagnostic(
            title="Directory Indexing is not enabled.",
            group="Access Control",
            weight=20,
            description=(
                "Directory indexing is properly disabled on your server. This prevents "
                "unauthorized users from browsing your website's directory structure, which "
                "could expose sensitive files, plugins, themes, or other components that might "
                "reveal vulnerabilities."
            ),
            fail="Directory indexing is enabled, exposing internal files.",
        ),
        Diagnostic(
            title="Sensitive files are not publicly accessible.",
            group="Access Control",
            weight=20,
            description=(
                "Sensitive files and directories are not publicly accessible. This ensures that "
                "configuration files, backup files, and other critical system components that "
                "might contain sensitive information cannot be accessed by unauthorized visitors."
            ),
            fail="Sensitive files or directories are publicly accessible.",
        ),
    ]

    def endpoint(self, target: Target, fetcher: Fetcher) -> str:
        return target.origin + fetcher.config.sensitive_path
