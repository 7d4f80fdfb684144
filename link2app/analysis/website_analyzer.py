# link2app/analysis/website_analyzer.py
"""
Best-effort page scrape used to build the generation prompt.

The page is fetched once with requests and walked with the standard library's
HTML parser. Nothing is rendered or executed, so script-built content is not
seen.
"""
from __future__ import annotations

import re
from html.parser import HTMLParser
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin, urlparse

import requests

from link2app.errors import TransportError, WebsiteAnalysisError
from link2app.models import LinkInfo, WebsiteAnalysis

MAX_CONTENT_CHARS = 2000
MAX_IMAGES = 5
MAX_LINKS = 10

USER_AGENT = "Mozilla/5.0 (compatible; Link2App/0.1; +https://github.com/ttracx/link2app)"

_SKIP_TEXT_TAGS = {"script", "style", "noscript", "template", "svg"}
_HEADING_TAGS = {"h1", "h2", "h3"}
_WS_RE = re.compile(r"\s+")


def _clean(text: str) -> str:
    return _WS_RE.sub(" ", text or "").strip()


class _PageParser(HTMLParser):
    def __init__(self, base_url: str):
        super().__init__(convert_charrefs=True)
        self.base_url = base_url
        self.title_parts: List[str] = []
        self.meta: Dict[str, str] = {}
        self.headings: List[str] = []
        self.text_parts: List[str] = []
        self.images: List[str] = []
        self.links: List[Dict[str, str]] = []
        self.forms = 0

        self._in_title = False
        self._skip_depth = 0
        self._heading: Optional[List[str]] = None
        self._link: Optional[Dict[str, Any]] = None

    def handle_starttag(self, tag, attrs):
        a = {k: (v or "") for k, v in attrs}
        if tag in _SKIP_TEXT_TAGS:
            self._skip_depth += 1
        elif tag == "title":
            self._in_title = True
        elif tag == "meta":
            key = (a.get("name") or a.get("property") or "").lower()
            if key and "content" in a:
                self.meta.setdefault(key, a["content"])
        elif tag in _HEADING_TAGS:
            self._heading = []
        elif tag == "img" and a.get("src"):
            self.images.append(urljoin(self.base_url, a["src"]))
        elif tag == "a" and a.get("href"):
            self._link = {"href": urljoin(self.base_url, a["href"]), "text": []}
        elif tag == "form":
            self.forms += 1

    def handle_endtag(self, tag):
        if tag in _SKIP_TEXT_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag == "title":
            self._in_title = False
        elif tag in _HEADING_TAGS and self._heading is not None:
            heading = _clean(" ".join(self._heading))
            if heading:
                self.headings.append(heading)
            self._heading = None
        elif tag == "a" and self._link is not None:
            self.links.append({"href": self._link["href"], "text": _clean(" ".join(self._link["text"]))})
            self._link = None

    def handle_data(self, data):
        if self._in_title:
            self.title_parts.append(data)
            return
        if self._skip_depth:
            return
        self.text_parts.append(data)
        if self._heading is not None:
            self._heading.append(data)
        if self._link is not None:
            self._link["text"].append(data)


def _validate_url(url: str) -> str:
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise WebsiteAnalysisError(f"Invalid website URL: {url!r}")
    return url


def parse_html(url: str, html: str) -> WebsiteAnalysis:
    parser = _PageParser(url)
    parser.feed(html)
    parser.close()

    keywords = [
        k.strip()
        for k in (parser.meta.get("keywords") or "").split(",")
        if k.strip()
    ]
    description = parser.meta.get("description") or parser.meta.get("og:description") or None
    content = _clean(" ".join(parser.text_parts))[:MAX_CONTENT_CHARS]

    return WebsiteAnalysis(
        url=url,
        title=_clean(" ".join(parser.title_parts)) or parser.meta.get("og:title", ""),
        description=_clean(description) if description else None,
        keywords=keywords,
        headings=parser.headings,
        content=content,
        images=parser.images[:MAX_IMAGES],
        links=[LinkInfo(**link) for link in parser.links[:MAX_LINKS]],
        forms=parser.forms,
        viewport=parser.meta.get("viewport"),
    )


def analyze_website(url: str, *, timeout: float = 30, session: Any = None) -> WebsiteAnalysis:
    """Fetch `url` and scrape what the prompt needs."""
    url = _validate_url(url)
    http = session or requests
    try:
        r = http.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(f"Could not load {url}: {e}") from e
    if not 200 <= r.status_code < 300:
        raise WebsiteAnalysisError(f"Failed to load {url}: HTTP {r.status_code}")
    return parse_html(url, r.text)


def format_extracted_content(analysis: WebsiteAnalysis) -> str:
    """Plain-text block handed to the model as the page description."""
    out = ""
    if analysis.title:
        out += f"Title: {analysis.title}\n\n"
    if analysis.description:
        out += f"Description: {analysis.description}\n\n"
    if analysis.keywords:
        out += f"Keywords: {', '.join(analysis.keywords)}\n\n"
    if analysis.headings:
        out += f"Headings: {' | '.join(analysis.headings)}\n\n"
    if analysis.content:
        out += f"Content: {analysis.content}\n\n"
    if analysis.images:
        out += f"Images: {', '.join(analysis.images)}\n\n"
    if analysis.links:
        out += "Links:\n"
        for link in analysis.links:
            out += f"- {link.text}: {link.href}\n"
        out += "\n"
    if analysis.forms:
        out += f"Forms: {analysis.forms}\n\n"
    return out.strip()


__all__ = ["analyze_website", "parse_html", "format_extracted_content"]
