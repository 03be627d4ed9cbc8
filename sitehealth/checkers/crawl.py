"""Network-side SEO checks for robots.txt and www canonicalization."""

from urllib.parse import urlsplit

from sitehealth.checkers.base import SeoCheck, SeoContext
from sitehealth.core.models import Absent, Status, Verdict


def host_variants(url: str):
    """(www, non-www) versions of *url*, keeping scheme and path."""
    parts = urlsplit(url)
    bare = (parts.hostname or "")
    if bare.startswith("www."):
        bare = bare[4:]
    port = f":{parts.port}" if parts.port else ""
    path = parts.path or "/"
    return (f"{parts.scheme}://www.{bare}{port}{path}",
            f"{parts.scheme}://{bare}{port}{path}")


class RobotsTxt(SeoCheck):

    key = "robot_text_analytics"
    section = "advanced"

    def evaluate(self, ctx: SeoContext) -> Verdict:
        evidence = ctx.fetcher.fetch_text(f"{ctx.target.origin}/robots.txt")
        if isinstance(evidence, Absent):
            return self.verdict(Status.FAIL, "robots.txt not found.")
        if "Disallow:" in evidence.text:
            return self.verdict(
                Status.PASS,
                "Your site has a robots.txt file which includes one or more Disallow: "
                "directives. Make sure that you only block parts you don't want to be indexed.",
            )
        return self.verdict(Status.PASS, "No disallow directives found.")


class WwwCanonicalization(SeoCheck):

    key = "checkcanonicalization"
    section = "advanced"

    def evaluate(self, ctx: SeoContext) -> Verdict:
        www_url, bare_url = host_variants(ctx.target.resolved_url)
        www = ctx.fetcher.final_url(www_url)
        bare = ctx.fetcher.final_url(bare_url)

        if (isinstance(www, Absent) or isinstance(bare, Absent)
                or www.final_url != bare.final_url):
            return self.verdict(Status.FAIL,
                                "Both www and non-www versions of your URL are not "
                                "redirected to the same site.")
        return self.verdict(Status.PASS, "WWW and non-WWW redirect to the same site.",
                            [www.final_url])
