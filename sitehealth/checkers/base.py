"""Abstract bases for all probes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

from sitehealth.core.document import Document
from sitehealth.core.fetch import Fetcher
from sitehealth.core.models import Status, Target, Verdict


@dataclass(frozen=True)
class Diagnostic:
    """Static wording and weight of one security diagnostic."""
    title: str
    group: str
    weight: int
    description: str
    fail: str


class SecurityProbe(ABC):
    """A security probe turns evidence about a Target into weighted verdicts."""

    name: str = "Unnamed Probe"
    diagnostics: List[Diagnostic] = []

    def __init__(self, logger=None):
        self.logger = logger

    # ── public API ──────────────────────────────────────────────

    @abstractmethod
    def probe(self, target: Target, fetcher: Fetcher) -> List[Verdict]:
        ...

    def fallback(self) -> List[Verdict]:
        """Failed verdicts used when the probe could not run at all."""
        return [
            Verdict(
                title=d.title, group=d.group, status=Status.FAIL,
                description=(f'{d.fail} The check "{d.title}" could not be completed '
                             "due to technical issues. Please try again later or check "
                             "your website configuration manually."),
                weight=d.weight,
            )
            for d in self.diagnostics
        ]

    # ── shared helpers ──────────────────────────────────────────

    def verdicts(self, passed: bool, raw_value: Any = None, detail: str = "") -> List[Verdict]:
        out = []
        for d in self.diagnostics:
            if passed:
                description = d.description
            else:
                description = (f'{d.fail} The check "{d.title}" has failed. Please review '
                               "your security headers or configuration to ensure best "
                               "practices are followed.")
            if detail:
                description = f"{description} {detail}"
            out.append(Verdict(title=d.title, group=d.group, status=Status.of(passed),
                               description=description, weight=d.weight,
                               raw_value=raw_value))
        if self.logger:
            if passed:
                self.logger.ok(f"{self.name} passed")
            else:
                self.logger.fail(f"{self.name} failed")
        return out


class SeoCheck(ABC):
    """
    One SEO diagnostic field.

    *key* is the field name in the rendered report and *section* is either
    "basic" or "advanced". Informational checks report INDETERMINATE.
    """

    key: str = ""
    section: str = "basic"
    informational: bool = False
    unavailable_message: str = "Unable to analyze the page."

    def __init__(self, logger=None):
        self.logger = logger

    @abstractmethod
    def evaluate(self, ctx: "SeoContext") -> Verdict:
        ...

    def verdict(self, status: Status, message: str, value: Any = None) -> Verdict:
        return Verdict(title=self.key, group=self.section, status=status,
                       description=message, raw_value=[] if value is None else value)

    def unavailable(self, reason: str = "") -> Verdict:
        status = Status.INDETERMINATE if self.informational else Status.FAIL
        message = self.unavailable_message
        if reason:
            message = f"{message} ({reason})"
        return self.verdict(status, message)


class DocumentCheck(SeoCheck):
    """An SEO check over the parsed document; missing document → unavailable."""

    def evaluate(self, ctx: "SeoContext") -> Verdict:
        if ctx.document is None:
            return self.unavailable(ctx.document_error)
        return self.check(ctx.document, ctx)

    @abstractmethod
    def check(self, document: Document, ctx: "SeoContext") -> Verdict:
        ...


@dataclass
class SeoContext:
    """Everything the SEO checks of one run share."""
    target: Target
    fetcher: Fetcher
    document: Optional[Document] = None
    document_error: str = ""
