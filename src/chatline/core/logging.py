"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys


def setup_logging(level: str | int | None = None) -> None:
    """Initialize the root logger once with a stdout handler and the given level.

    Unknown level names fall back to INFO.
    """
    if isinstance(level, int):
        desired_level = level
    elif isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            desired_level = int(name)
        else:
            desired_level = logging.getLevelNamesMapping().get(name, logging.INFO)
    else:
        desired_level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        root.addHandler(handler)
        logging.captureWarnings(True)
    root.setLevel(desired_level)
