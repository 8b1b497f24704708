"""HTML traversal that enumerates image references and CSS sources."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup

from .config import ExplodeConfig
from .extractors import FontExtractor
from .models import EMBEDDED_BLOCK, INLINE_ATTRIBUTE, StylesheetSource, WalkResult
from .utils import is_absolute_url, is_data_uri, resolve_url

logger = logging.getLogger("design_exploder")


def parse_html(html: str, config: Optional[ExplodeConfig] = None) -> BeautifulSoup:
    parser = (config or ExplodeConfig()).parser
    return BeautifulSoup(html, parser)


def document_base_url(soup: BeautifulSoup, url: str) -> str:
    """Honour ``<base href>`` when the page declares one."""
    base_tag = soup.find("base", href=True)
    if base_tag:
        candidate = resolve_url(url, base_tag["href"].strip())
        if is_absolute_url(candidate):
            return candidate
    return url


def _srcset_urls(srcset: str) -> Iterable[str]:
    """Yield the URL of each srcset candidate.

    Follows the HTML parsing rules: a URL runs until whitespace, so commas inside
    it (``data:image/png;base64,...``) do not start a new candidate. Trailing
    commas end the candidate; otherwise its descriptors run to the next comma.
    """
    pos, end = 0, len(srcset)
    while pos < end:
        while pos < end and (srcset[pos].isspace() or srcset[pos] == ","):
            pos += 1
        start = pos
        while pos < end and not srcset[pos].isspace():
            pos += 1
        url = srcset[start:pos]
        if url.endswith(","):
            url = url.rstrip(",")
        else:
            comma = srcset.find(",", pos)
            pos = end if comma == -1 else comma + 1
        if url:
            yield url


def _is_stylesheet(link) -> bool:
    rel = link.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return any(token.lower() == "stylesheet" for token in rel)


def walk(
    soup: BeautifulSoup,
    base_url: str,
    config: Optional[ExplodeConfig] = None,
) -> WalkResult:
    """Collect images, CSS fragments and stylesheet links from a parsed page.

    Nothing is fetched here; external stylesheets are only queued.
    """
    config = config or ExplodeConfig()
    fonts = FontExtractor(config.font_service_hosts)
    result = WalkResult()

    def add_image(reference: Optional[str]) -> None:
        reference = (reference or "").strip()
        if reference and not is_data_uri(reference):
            result.image_urls.setdefault(resolve_url(base_url, reference), None)

    for img in soup.find_all("img"):
        add_image(img.get("src"))

    for element in soup.find_all(["img", "source"], srcset=True):
        for reference in _srcset_urls(element["srcset"]):
            add_image(reference)

    for element in soup.find_all(style=True):
        style = element["style"]
        if style:
            result.css_fragments.append(StylesheetSource(INLINE_ATTRIBUTE, style, base_url))

    for style_tag in soup.find_all("style"):
        css = style_tag.get_text()
        if css:
            result.css_fragments.append(StylesheetSource(EMBEDDED_BLOCK, css, base_url))

    queued: List[str] = []
    for link in soup.find_all("link", href=True):
        if not _is_stylesheet(link):
            continue
        href = link["href"].strip()
        if not href:
            continue
        stylesheet_url = resolve_url(base_url, href)
        queued.append(stylesheet_url)
        if fonts.is_service_link(stylesheet_url):
            result.font_service_links.append(stylesheet_url)
    result.stylesheet_urls = list(dict.fromkeys(queued))

    logger.debug(
        "Walked %s: %d images, %d CSS fragments, %d stylesheets",
        base_url,
        len(result.image_urls),
        len(result.css_fragments),
        len(result.stylesheet_urls),
    )
    return result
