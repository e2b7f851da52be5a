from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "WARNING") -> None:
    """Send log records to stderr so CLI output on stdout stays parseable."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
