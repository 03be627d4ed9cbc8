"""HTML structure analysis over a fetched document, using BeautifulSoup."""

import re
import unicodedata
from collections import Counter
from typing import Dict, List, Tuple
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from sitehealth.core.stopwords import STOPWORDS


_STRIP_TAGS = ["script", "style", "noscript", "template"]
_NOISE_CLASSES = ("shortcode", "carousel", "grid", "dtcss", "portfolio")
_OG_PROPERTY = re.compile(r"^og:")


def _is_hidden(tag: Tag) -> bool:
    if tag.has_attr("hidden"):
        return True
    if (tag.get("aria-hidden") or "").strip().lower() == "true":
        return True
    style = re.sub(r"\s+", "", tag.get("style") or "").lower()
    return "display:none" in style


def _is_noise(tag: Tag) -> bool:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    joined = " ".join(classes).lower()
    return any(noise in joined for noise in _NOISE_CLASSES)


def clean_token(token: str) -> str:
    """Keep letters only, lower-cased."""
    return "".join(ch for ch in token if ch.isalpha()).lower()


def base_letters(word: str) -> str:
    """Case- and accent-insensitive form used for alphabetical ordering."""
    decomposed = unicodedata.normalize("NFKD", word)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def keyword_frequencies(html: str, top_n: int = 10) -> Dict[str, int]:
    """
    Most frequent visible words of *html*.

    Scripts, styles, hidden elements and known layout-noise containers are
    dropped first; tokens shorter than three letters and stopwords are
    ignored. Ordered by count descending, then alphabetically.
    """
    soup = BeautifulSoup(html, "html.parser")
    for node in soup(_STRIP_TAGS):
        node.decompose()
    for tag in soup.find_all(lambda t: _is_hidden(t) or _is_noise(t)):
        if tag.decomposed:
            continue
        tag.decompose()

    root = soup.body or soup
    counts: Counter = Counter()
    for node in root.find_all(string=True):
        if not isinstance(node, NavigableString) or isinstance(node, PreformattedString):
            continue
        text = node.strip()
        if not text or text.startswith("/*!"):
            continue
        for token in text.split():
            word = clean_token(token)
            if len(word) <= 2 or word in STOPWORDS:
                continue
            counts[word] += 1

    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], base_letters(kv[0]), kv[0]))
    return dict(ranked[:top_n])


class Document:
    """Parsed page with the extractors the SEO probes rely on."""

    def __init__(self, html: str, url: str):
        self.html = html
        self.url = url
        self.soup = BeautifulSoup(html, "html.parser")
        self._keywords = None

    def texts(self, tag: str) -> List[str]:
        return [el.get_text().strip() for el in self.soup.find_all(tag)]

    def titles(self) -> List[str]:
        return self.texts("title")

    def headings(self, level: int) -> List[str]:
        return self.texts(f"h{level}")

    def meta_contents(self, name: str) -> List[str]:
        name = name.lower()
        return [el.get("content") or "" for el in self.soup.find_all("meta")
                if (el.get("name") or "").lower() == name]

    def descriptions(self) -> List[str]:
        return self.meta_contents("description")

    def canonical_links(self) -> List[str]:
        return [el.get("href") or "" for el in self.soup.find_all("link", rel="canonical")]

    def open_graph(self) -> List[str]:
        return [el.get("content") or ""
                for el in self.soup.find_all("meta", attrs={"property": _OG_PROPERTY})]

    def structured_data_count(self) -> int:
        return len(self.soup.find_all("script", attrs={"type": "application/ld+json"}))

    def images_missing_alt(self) -> List[str]:
        return [str(img) for img in self.soup.find_all("img") if not img.get("alt")]

    def link_counts(self) -> Tuple[int, int]:
        """(internal, external) anchors, deduplicated by href + text."""
        base_host = urlsplit(self.url).hostname
        internal = external = 0
        seen = set()
        for a in self.soup.find_all("a", href=True):
            href = a["href"]
            key = f"{href}|{a.get_text().strip().lower()}"
            if not href or key in seen:
                continue
            seen.add(key)
            try:
                host = urlsplit(urljoin(self.url, href)).hostname
            except ValueError:
                continue
            if host == base_host:
                internal += 1
            else:
                external += 1
        return internal, external

    def keywords(self) -> Dict[str, int]:
        if self._keywords is None:
            self._keywords = keyword_frequencies(self.html)
        return self._keywords
