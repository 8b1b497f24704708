"""Command-line entry point for design asset extraction."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Sequence

from .config import ExplodeConfig
from .errors import ExplodeError, InternalError, UpstreamFetchError, ValidationError
from .exploder import explode

logger = logging.getLogger("design_exploder.cli")

_DEFAULTS = ExplodeConfig()

EXIT_CODES = {
    ValidationError: 2,
    UpstreamFetchError: 3,
    InternalError: 1,
}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract image URLs, hex colors and font families from a web page.",
    )
    parser.add_argument("url", help="Page to extract design assets from")
    parser.add_argument(
        "--timeout",
        type=float,
        default=_DEFAULTS.document_timeout,
        help="Timeout in seconds for fetching the page itself",
    )
    parser.add_argument(
        "--stylesheet-timeout",
        type=float,
        default=_DEFAULTS.stylesheet_timeout,
        help="Timeout in seconds for each external stylesheet",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=_DEFAULTS.max_concurrent_fetches,
        help="Maximum number of stylesheets fetched at the same time",
    )
    parser.add_argument(
        "--user-agent",
        default=_DEFAULTS.user_agent,
        help="User-Agent header sent with every request",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Indentation of the JSON output (0 for compact)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    config = ExplodeConfig(
        user_agent=args.user_agent,
        document_timeout=args.timeout,
        stylesheet_timeout=args.stylesheet_timeout,
        max_concurrent_fetches=args.max_concurrency,
    )
    indent = args.indent or None

    try:
        assets = asyncio.run(explode(args.url, config))
    except ExplodeError as exc:
        logger.debug("Extraction failed: %s", exc)
        sys.stdout.write(json.dumps(exc.to_dict(), indent=indent) + "\n")
        return EXIT_CODES.get(type(exc), 1)

    sys.stdout.write(json.dumps(assets.to_dict(), indent=indent) + "\n")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
