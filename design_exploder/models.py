"""Data models used throughout the extraction pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .utils import is_absolute_url, is_data_uri

logger = logging.getLogger("design_exploder")

INLINE_ATTRIBUTE = "inline-attribute"
EMBEDDED_BLOCK = "embedded-block"
EXTERNAL_LINK = "external-link"


@dataclass(frozen=True)
class Document:
    """Fetched page markup and the URL its relative references resolve against."""

    html: str
    url: str
    base_url: str


@dataclass(frozen=True)
class StylesheetSource:
    """One unit of CSS text contributing to the combined corpus."""

    kind: str
    text: str
    base_url: str


@dataclass
class WalkResult:
    """Everything the document walker found in the markup."""

    image_urls: Dict[str, None] = field(default_factory=dict)
    css_fragments: List[StylesheetSource] = field(default_factory=list)
    stylesheet_urls: List[str] = field(default_factory=list)
    font_service_links: List[str] = field(default_factory=list)


@dataclass
class AssetCollection:
    """Deduplicated images, colors and fonts produced by one extraction run."""

    images: Dict[str, None] = field(default_factory=dict)
    colors: Dict[str, None] = field(default_factory=dict)
    fonts: Dict[str, None] = field(default_factory=dict)

    def add_images(self, urls: Iterable[str]) -> None:
        for url in urls:
            url = (url or "").strip()
            if not url or is_data_uri(url):
                continue
            if not is_absolute_url(url):
                logger.debug("Dropping non-absolute image reference %r", url)
                continue
            self.images.setdefault(url, None)

    def add_colors(self, colors: Iterable[str]) -> None:
        for color in colors:
            if color:
                self.colors.setdefault(color, None)

    def add_fonts(self, fonts: Iterable[str]) -> None:
        for font in fonts:
            font = (font or "").strip()
            if font:
                self.fonts.setdefault(font, None)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "images": list(self.images),
            "colors": list(self.colors),
            "fonts": list(self.fonts),
        }
