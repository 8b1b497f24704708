"""Concurrent fetching of external stylesheets and assembly of the CSS corpus."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Sequence

import requests

from .config import ExplodeConfig
from .models import EXTERNAL_LINK, StylesheetSource

logger = logging.getLogger("design_exploder")

CHUNK_SIZE = 16 * 1024


def _decode(body: bytes, resp: requests.Response) -> str:
    content_type = resp.headers.get("Content-Type", "")
    encoding = resp.encoding if "charset" in content_type.lower() else None
    return body.decode(encoding or "utf-8", errors="replace")


def fetch_stylesheet(url: str, config: ExplodeConfig) -> Optional[str]:
    """Download one stylesheet within ``config.stylesheet_timeout``; any failure yields ``None``.

    The request timeout only bounds single socket operations, so the body is
    streamed and abandoned once the overall deadline passes.
    """
    deadline = time.monotonic() + config.stylesheet_timeout
    chunks: List[bytes] = []
    try:
        with requests.get(
            url,
            headers=config.headers,
            timeout=config.stylesheet_timeout,
            stream=True,
        ) as resp:
            resp.raise_for_status()
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    logger.warning("Timed out fetching stylesheet %s", url)
                    return None
                chunks.append(chunk)
            return _decode(b"".join(chunks), resp)
    except requests.Timeout:
        logger.warning("Timed out fetching stylesheet %s", url)
        return None
    except requests.RequestException as exc:
        logger.warning("Failed to fetch stylesheet %s: %s", url, exc)
        return None


def combine_sources(sources: Sequence[StylesheetSource]) -> str:
    return "\n".join(source.text for source in sources)


class StylesheetAggregator:
    """Fans out one fetch per stylesheet URL and joins them at a single barrier."""

    def __init__(self, config: Optional[ExplodeConfig] = None) -> None:
        self.config = config or ExplodeConfig()

    async def _fetch(self, url: str, semaphore: asyncio.Semaphore) -> Optional[StylesheetSource]:
        # The slot is held until the worker thread returns; fetch_stylesheet
        # enforces its own deadline.
        async with semaphore:
            try:
                css = await asyncio.to_thread(fetch_stylesheet, url, self.config)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Unexpected error fetching stylesheet %s", url)
                return None
        if not css:
            return None
        return StylesheetSource(EXTERNAL_LINK, css, url)

    async def fetch_all(self, urls: Sequence[str]) -> List[StylesheetSource]:
        if not urls:
            return []
        semaphore = asyncio.Semaphore(max(1, self.config.max_concurrent_fetches))
        outcomes = await asyncio.gather(*(self._fetch(url, semaphore) for url in urls))
        recovered = [source for source in outcomes if source is not None]
        logger.info("Fetched %d/%d external stylesheets", len(recovered), len(urls))
        return recovered

    async def gather_sources(
        self,
        urls: Sequence[str],
        fragments: Sequence[StylesheetSource],
    ) -> List[StylesheetSource]:
        """Return inline and embedded fragments followed by every recovered stylesheet."""
        external = await self.fetch_all(urls)
        return [*fragments, *external]

    async def aggregate(
        self,
        urls: Sequence[str],
        fragments: Sequence[StylesheetSource],
    ) -> str:
        return combine_sources(await self.gather_sources(urls, fragments))
