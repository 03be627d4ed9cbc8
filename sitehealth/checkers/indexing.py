"""Indexing checks: canonical tag, robots meta, OpenGraph, schema and SERP preview."""

from html import escape

from sitehealth.checkers.base import DocumentCheck, SeoContext
from sitehealth.core.document import Document
from sitehealth.core.models import Status, Verdict


DEFAULT_ROBOTS = "follow, index, max-snippet:-1, max-video-preview:-1, max-image-preview:large"


def search_preview(title: str, description: str, url: str, variant: str = "desktop") -> str:
    return (f'<div class="serp-preview {variant}-serp-preview">'
            f'<div class="serp-title">{escape(title)}</div>'
            f'<div class="serp-url">{escape(url)}</div>'
            f'<div class="serp-description">{escape(description)}</div></div>')


class SearchPreview(DocumentCheck):

    key = "search_preview"
    section = "advanced"
    informational = True
    variant = "desktop"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        title = (document.titles() or [""])[0]
        desc = (document.descriptions() or [""])[0]
        html = search_preview(title, desc, ctx.target.url, self.variant)
        return self.verdict(Status.INDETERMINATE,
                            "Here is how your site may appear in search results:", [html])


class MobileSearchPreview(SearchPreview):

    key = "mobile_search_preview"
    variant = "mobile"


class CanonicalTag(DocumentCheck):

    key = "canonical_contents"
    section = "advanced"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        links = document.canonical_links()
        if links:
            return self.verdict(Status.PASS, "Your page is using the canonical link tag.", links)
        return self.verdict(Status.FAIL, "No canonical link tag found.")


class NoIndex(DocumentCheck):

    key = "noindex_description"
    section = "advanced"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        robots = (document.meta_contents("robots") or [""])[0]
        if "noindex" in robots.lower():
            return self.verdict(Status.FAIL,
                                "Your page contains a noindex meta tag and will not be indexed.",
                                [robots])
        return self.verdict(Status.PASS, "Your page contains the index meta tag or header.",
                            [robots or DEFAULT_ROBOTS])


class OpenGraph(DocumentCheck):

    key = "og_contents"
    section = "advanced"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        og = document.open_graph()
        if og:
            return self.verdict(Status.PASS, "Opengraph meta tags have been found.", og)
        return self.verdict(Status.FAIL, "No Opengraph meta tags found.")


class StructuredData(DocumentCheck):

    key = "checkschemameta"
    section = "advanced"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        if document.structured_data_count() > 0:
            return self.verdict(Status.PASS, "Schema.org data has been found on your homepage.")
        return self.verdict(Status.FAIL, "No Schema.org data found.")
