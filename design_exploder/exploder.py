"""High-level orchestration: fetch a page, walk it, and extract its design assets."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

import requests

from .config import ExplodeConfig
from .errors import ExplodeError, InternalError, UpstreamFetchError, ValidationError
from .extractors import BackgroundImageExtractor, ColorExtractor, FontExtractor
from .models import AssetCollection, Document
from .stylesheets import StylesheetAggregator, combine_sources
from .utils import is_valid_target_url
from .walker import document_base_url, parse_html, walk

logger = logging.getLogger("design_exploder")


def validate_url(url: Optional[str]) -> str:
    if not url or not str(url).strip():
        raise ValidationError("URL is required")
    url = str(url).strip()
    if not is_valid_target_url(url):
        raise ValidationError(f"Invalid URL format: {url}")
    return url


def fetch_document(url: str, config: ExplodeConfig) -> Document:
    """Download the target page; any failure aborts the extraction."""
    logger.info("Loading %s", url)
    try:
        resp = requests.get(url, headers=config.headers, timeout=config.document_timeout)
    except requests.RequestException as exc:
        raise UpstreamFetchError(f"Failed to fetch URL: {exc}") from exc
    if not resp.ok:
        raise UpstreamFetchError(
            f"Failed to fetch URL: {resp.status_code} {resp.reason or ''}".rstrip(),
            status_code=resp.status_code,
        )
    final_url = resp.url or url
    return Document(html=resp.text, url=url, base_url=final_url)


async def _extract(document: Document, config: ExplodeConfig) -> AssetCollection:
    soup = parse_html(document.html, config)
    base_url = document_base_url(soup, document.base_url)
    walked = walk(soup, base_url, config)

    aggregator = StylesheetAggregator(config)
    sources = await aggregator.gather_sources(walked.stylesheet_urls, walked.css_fragments)
    corpus = combine_sources(sources)

    backgrounds = BackgroundImageExtractor()
    fonts = FontExtractor(config.font_service_hosts)

    assets = AssetCollection()
    assets.add_images(walked.image_urls)
    for source in sources:
        assets.add_images(backgrounds.extract(source.text, source.base_url))
    assets.add_colors(ColorExtractor().extract(corpus))
    assets.add_fonts(fonts.extract(corpus))
    assets.add_fonts(fonts.extract_from_links(walked.font_service_links))
    return assets


async def explode(url: Optional[str], config: Optional[ExplodeConfig] = None) -> AssetCollection:
    """Extract images, colors and fonts from the page at ``url``.

    Raises :class:`ValidationError` before any network access for a bad URL,
    :class:`UpstreamFetchError` when the page itself cannot be fetched, and
    :class:`InternalError` for anything unexpected afterwards. Failing external
    stylesheets are skipped and never raise.
    """
    config = config or ExplodeConfig()
    url = validate_url(url)
    start = time.perf_counter()

    try:
        document = await asyncio.to_thread(fetch_document, url, config)
        assets = await _extract(document, config)
    except ExplodeError:
        raise
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected error extracting assets from %s", url)
        raise InternalError() from exc

    logger.info(
        "Extracted %d images, %d colors, %d fonts from %s in %.2fs",
        len(assets.images),
        len(assets.colors),
        len(assets.fonts),
        url,
        time.perf_counter() - start,
    )
    return assets


def explode_sync(url: Optional[str], config: Optional[ExplodeConfig] = None) -> AssetCollection:
    return asyncio.run(explode(url, config))
