"""Probe engine that runs the security and SEO probe sets and builds their reports."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import httpx

from sitehealth.checkers.base import SecurityProbe, SeoCheck, SeoContext
from sitehealth.checkers.content import (
    CommonKeywords, H1Headings, H2Headings, ImageAltAttributes,
    KeywordsInTitleAndDescription, LinksRatio, MetaDescription, PageTitle,
)
from sitehealth.checkers.crawl import RobotsTxt, WwwCanonicalization
from sitehealth.checkers.exposure import AdminExposure, SensitiveFileExposure
from sitehealth.checkers.headers import SecurityHeaders
from sitehealth.checkers.indexing import (
    CanonicalTag, MobileSearchPreview, NoIndex, OpenGraph, SearchPreview, StructuredData,
)
from sitehealth.checkers.tls import TLSConfiguration
from sitehealth.core.aggregator import aggregate, security_dict, seo_sections
from sitehealth.core.config import Config
from sitehealth.core.document import Document
from sitehealth.core.fetch import Fetcher, build_target, normalize_url
from sitehealth.core.models import Absent, DiagnosticReport, Status, Verdict


def default_security_probes(logger=None) -> List[SecurityProbe]:
    return [
        SecurityHeaders(logger),
        TLSConfiguration(logger),
        AdminExposure(logger),
        SensitiveFileExposure(logger),
    ]


def default_seo_checks(logger=None) -> List[SeoCheck]:
    return [
        CommonKeywords(logger),
        MetaDescription(logger),
        H1Headings(logger),
        H2Headings(logger),
        ImageAltAttributes(logger),
        KeywordsInTitleAndDescription(logger),
        LinksRatio(logger),
        PageTitle(logger),
        SearchPreview(logger),
        MobileSearchPreview(logger),
        CanonicalTag(logger),
        NoIndex(logger),
        WwwCanonicalization(logger),
        OpenGraph(logger),
        RobotsTxt(logger),
        StructuredData(logger),
    ]


class Engine:
    def __init__(self, config: Optional[Config] = None, logger=None,
                 transport: Optional[httpx.BaseTransport] = None,
                 security_probes: Optional[List[SecurityProbe]] = None,
                 seo_checks: Optional[List[SeoCheck]] = None):
        self.name = "SiteHealth"
        self.version = "1.0.0"
        self.config = config or Config()
        self.logger = logger
        self.transport = transport
        self.security_probes = (default_security_probes(logger) if security_probes is None
                                else security_probes)
        self.seo_checks = default_seo_checks(logger) if seo_checks is None else seo_checks

    def _fetcher(self) -> Fetcher:
        return Fetcher(self.config, logger=self.logger, transport=self.transport)

    # ---------- Security ----------

    def security_report(self, url: str) -> DiagnosticReport:
        """Resolve the target once, then run every probe concurrently against it."""
        with self._fetcher() as fetcher:
            target = fetcher.resolve_target(url)
            if self.logger:
                self.logger.info(f"Running {len(self.security_probes)} security probes on "
                                 f"{target.resolved_url}")
            with ThreadPoolExecutor(max_workers=max(1, len(self.security_probes))) as pool:
                futures = [pool.submit(p.probe, target, fetcher) for p in self.security_probes]
                verdicts = [v for f in futures for v in f.result()]
        return aggregate(verdicts, scored=True)

    def security_fallback(self) -> DiagnosticReport:
        return aggregate([v for p in self.security_probes for v in p.fallback()], scored=True)

    def run_security(self, url: str) -> Dict[str, Any]:
        try:
            report = self.security_report(url)
        except Exception as exc:
            if self.logger:
                self.logger.fail(f"Security check failed for {url}: {exc}")
            report = self.security_fallback()
        if self.logger:
            self.logger.report(report)
        return security_dict(report)

    # ---------- SEO ----------

    def seo_verdicts(self, url: str) -> List[Verdict]:
        url = normalize_url(url)
        with self._fetcher() as fetcher:
            evidence = fetcher.fetch_html(url)
            if isinstance(evidence, Absent):
                ctx = SeoContext(build_target(url, url, reachable=False), fetcher,
                                 document_error=evidence.reason)
            else:
                ctx = SeoContext(build_target(url, evidence.url), fetcher,
                                 document=Document(evidence.html, evidence.url))
            if self.logger:
                self.logger.info(f"Running {len(self.seo_checks)} SEO checks on "
                                 f"{ctx.target.resolved_url}")
            return [check.evaluate(ctx) for check in self.seo_checks]

    def seo_fallback(self) -> List[Verdict]:
        verdicts = []
        for check in self.seo_checks:
            status = Status.INDETERMINATE if check.informational else Status.FAIL
            verdicts.append(check.verdict(
                status, "This check could not be completed due to technical issues. "
                        "Please try again later."))
        return verdicts

    def seo_report(self, url: str) -> DiagnosticReport:
        return aggregate(self.seo_verdicts(url))

    def run_seo(self, url: str) -> Dict[str, Any]:
        try:
            verdicts = self.seo_verdicts(url)
        except Exception as exc:
            if self.logger:
                self.logger.fail(f"SEO analysis failed for {url}: {exc}")
            verdicts = self.seo_fallback()
        if self.logger:
            self.logger.report(aggregate(verdicts))
        return seo_sections(verdicts)


def run_security_probe_set(url: str, config: Optional[Config] = None, logger=None) -> Dict[str, Any]:
    return Engine(config, logger=logger).run_security(url)


def run_seo_probe_set(url: str, config: Optional[Config] = None, logger=None) -> Dict[str, Any]:
    return Engine(config, logger=logger).run_seo(url)
