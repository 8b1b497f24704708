"""Configuration objects and constants for asset extraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) design-exploder/0.1"
)
DEFAULT_FONT_SERVICE_HOSTS = ("fonts.googleapis.com",)


@dataclass
class ExplodeConfig:
    """Settings that control fetching and parsing during one extraction run."""

    user_agent: str = DEFAULT_USER_AGENT
    document_timeout: float = 30.0
    stylesheet_timeout: float = 10.0
    max_concurrent_fetches: int = 8
    font_service_hosts: Tuple[str, ...] = DEFAULT_FONT_SERVICE_HOSTS
    parser: str = "html.parser"

    @property
    def headers(self) -> dict:
        return {"User-Agent": self.user_agent}
