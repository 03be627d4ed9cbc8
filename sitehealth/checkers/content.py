"""On-page content checks: title, description, headings, images, keywords and links."""

from sitehealth.checkers.base import DocumentCheck, SeoContext
from sitehealth.core.document import Document
from sitehealth.core.models import Status, Verdict


TITLE_RANGE = (30, 60)
DESCRIPTION_RANGE = (120, 160)
MAX_H2 = 20
PREVIEW_ITEMS = 5
OVERLAP_KEYWORDS = 5


class CommonKeywords(DocumentCheck):

    key = "common_keywords"
    informational = True

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        return self.verdict(Status.INDETERMINATE,
                            "Here are the most common keywords we found on your page:",
                            document.keywords())


class MetaDescription(DocumentCheck):

    key = "SEO_description"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        descriptions = document.descriptions()
        if not descriptions:
            return self.verdict(Status.FAIL, "No meta description found.")
        desc = descriptions[0]
        low, high = DESCRIPTION_RANGE
        return self.verdict(
            Status.of(low <= len(desc) <= high),
            f"Meta description was found and it is {len(desc)} characters long. {desc}",
        )


class H1Headings(DocumentCheck):

    key = "H1_contents"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        h1 = document.headings(1)
        if not h1:
            return self.verdict(Status.FAIL, "No H1 tag was found on your page.")
        if len(h1) == 1:
            return self.verdict(Status.PASS, "One H1 tag was found on your page.", h1)
        return self.verdict(Status.FAIL,
                            f"Multiple H1 tags ({len(h1)}) were found on your page.", h1)


class H2Headings(DocumentCheck):

    key = "H2_contents"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        h2 = document.headings(2)
        if not h2:
            return self.verdict(Status.FAIL, "No H2 tags were found on your page.")
        if len(h2) > MAX_H2:
            return self.verdict(Status.FAIL,
                                f"More than {MAX_H2} H2 tags were found on your page.",
                                h2[:PREVIEW_ITEMS])
        return self.verdict(Status.PASS, f"{len(h2)} H2 tags were found on your page.", h2)


class ImageAltAttributes(DocumentCheck):

    key = "Image_ALT_Attributes"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        missing = document.images_missing_alt()
        if not missing:
            return self.verdict(Status.PASS, "All images have alt attributes.")
        return self.verdict(
            Status.FAIL,
            f"Some images on your homepage have no alt attribute. ({len(missing)}).",
            missing[:PREVIEW_ITEMS],
        )


class KeywordsInTitleAndDescription(DocumentCheck):

    key = "Keywords_in_Title_and_Description"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        top = list(document.keywords())[:OVERLAP_KEYWORDS]
        title_text = " ".join(document.titles()).lower()
        desc_text = " ".join(document.descriptions()).lower()

        matches = []
        in_title = [kw for kw in top if kw in title_text]
        in_desc = [kw for kw in top if kw in desc_text]
        if in_title:
            matches.append(f"title: {', '.join(in_title)}")
        if in_desc:
            matches.append(f"description: {', '.join(in_desc)}")

        if matches:
            return self.verdict(Status.PASS,
                                "One or more common keywords were found in the title and "
                                "description of your page.", matches)
        return self.verdict(Status.FAIL, "No common keywords found in title and description.")


class LinksRatio(DocumentCheck):
    """Informational; any mix of internal and external links passes."""

    key = "Links_Ratio"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        internal, external = document.link_counts()
        return self.verdict(Status.PASS,
                            "Your page has a correct number of internal and external links.",
                            [f"internal: {internal}", f"external: {external}"])


class PageTitle(DocumentCheck):

    key = "SEO_Title"

    def check(self, document: Document, ctx: SeoContext) -> Verdict:
        titles = document.titles()
        if not titles:
            return self.verdict(Status.FAIL, "No title found.")
        title = titles[0]
        low, high = TITLE_RANGE
        if len(title) < low:
            note = " It is too short."
        elif len(title) > high:
            note = " It is too long."
        else:
            note = ""
        return self.verdict(Status.of(low <= len(title) <= high),
                            f"The title of your page has {len(title)} characters.{note}",
                            [title])
