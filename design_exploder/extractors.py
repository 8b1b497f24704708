"""Pattern-based extraction of colors, fonts and background images from CSS text."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence
from urllib.parse import parse_qs, urlparse

from .config import DEFAULT_FONT_SERVICE_HOSTS
from .utils import is_data_uri, resolve_url

CSS_WIDE_KEYWORDS = {"inherit", "initial", "unset", "none"}
_QUOTES = "'\""


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


class ColorExtractor:
    """Finds 3- and 6-digit hex color literals and normalizes them to ``#RRGGBB``."""

    pattern = re.compile(r"#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})\b")

    @staticmethod
    def normalize(digits: str) -> str:
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return "#" + digits.upper()

    def extract(self, text: str) -> List[str]:
        return _unique(self.normalize(m.group(1)) for m in self.pattern.finditer(text or ""))


class FontExtractor:
    """Collects font family names from CSS declarations and font-service links.

    Three sources are unioned:

    * ``font-family`` declarations, split on commas with CSS-wide keywords dropped;
    * ``@font-face`` blocks, whose single declared family is kept whole;
    * font-service stylesheet links carrying a ``family`` query parameter.

    Names are compared as exact strings; no case folding is applied.
    """

    declaration_pattern = re.compile(r"font-family\s*:\s*([^;{}]+)", re.IGNORECASE)
    font_face_pattern = re.compile(r"@font-face\s*{([^}]+)}", re.IGNORECASE)
    font_face_family_pattern = re.compile(
        r"font-family\s*:\s*['\"]?([^'\";]+)['\"]?", re.IGNORECASE
    )
    important_pattern = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)

    def __init__(self, service_hosts: Sequence[str] = DEFAULT_FONT_SERVICE_HOSTS) -> None:
        self.service_hosts = tuple(host.lower() for host in service_hosts)

    @staticmethod
    def _clean(token: str) -> str:
        return token.strip().strip(_QUOTES).strip()

    def _declared_families(self, css: str) -> Iterable[str]:
        for match in self.declaration_pattern.finditer(css):
            value = self.important_pattern.sub("", match.group(1))
            for token in value.split(","):
                family = self._clean(token)
                if family and family.lower() not in CSS_WIDE_KEYWORDS:
                    yield family

    def _font_face_families(self, css: str) -> Iterable[str]:
        for block in self.font_face_pattern.finditer(css):
            match = self.font_face_family_pattern.search(block.group(1))
            if match:
                family = self._clean(match.group(1))
                if family:
                    yield family

    def extract(self, css: str) -> List[str]:
        css = css or ""
        fonts = list(self._declared_families(css))
        fonts.extend(self._font_face_families(css))
        return _unique(fonts)

    def is_service_link(self, href: str) -> bool:
        try:
            host = (urlparse(href).hostname or "").lower()
        except ValueError:
            return False
        return host in self.service_hosts

    def extract_from_links(self, hrefs: Iterable[str]) -> List[str]:
        """Read families straight out of font-service URLs.

        The legacy API packs families into one ``family`` parameter separated by
        ``|`` (``Open+Sans:400,700|Roboto``); the css2 API repeats the parameter
        (``family=Inter:wght@400&family=Lora``). ``+`` stands for a space and the
        text after ``:`` selects variants.
        """
        fonts: List[str] = []
        for href in hrefs:
            if not self.is_service_link(href):
                continue
            query = urlparse(href).query
            for value in parse_qs(query).get("family", []):
                for family in value.split("|"):
                    family = family.split(":", 1)[0].replace("+", " ").strip()
                    if family:
                        fonts.append(family)
        return _unique(fonts)


class BackgroundImageExtractor:
    """Collects ``url(...)`` references from CSS, skipping embedded data URIs."""

    pattern = re.compile(r"url\(\s*['\"]?([^'\")]+?)['\"]?\s*\)", re.IGNORECASE)

    def extract(self, css: str, base_url: str) -> List[str]:
        images: List[str] = []
        for match in self.pattern.finditer(css or ""):
            reference = match.group(1).strip()
            if not reference or is_data_uri(reference):
                continue
            images.append(resolve_url(base_url, reference))
        return images


_colors = ColorExtractor()
_fonts = FontExtractor()
_backgrounds = BackgroundImageExtractor()


def extract_colors(text: str) -> List[str]:
    return _colors.extract(text)


def extract_fonts(css: str) -> List[str]:
    return _fonts.extract(css)


def extract_font_service_families(
    hrefs: Iterable[str], service_hosts: Optional[Sequence[str]] = None
) -> List[str]:
    extractor = _fonts if service_hosts is None else FontExtractor(service_hosts)
    return extractor.extract_from_links(hrefs)


def extract_background_images(css: str, base_url: str) -> List[str]:
    return _backgrounds.extract(css, base_url)
