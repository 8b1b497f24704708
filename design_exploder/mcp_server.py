"""MCP server exposing the design asset extraction tool."""

from __future__ import annotations

import logging
from typing import Dict, List

from mcp.server.fastmcp import FastMCP

from .errors import ExplodeError
from .exploder import explode as explode_url

logger = logging.getLogger("design_exploder.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="design-exploder")


@mcp.tool()
async def explode(url: str) -> Dict[str, List[str]]:
    """Fetch a web page and return its image URLs, hex colors and font families."""
    try:
        assets = await explode_url(url)
    except ExplodeError as exc:
        raise RuntimeError(f"{exc.kind}: {exc.message}") from exc
    return assets.to_dict()


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
