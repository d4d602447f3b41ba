"""
Logging helpers for the crypto text engine.

Centralising log configuration keeps the rest of the modules focused on their
domain logic. The terminal renderer owns stdout, so callers can route logs to
another stream.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"


def configure_logging(
    level: int = logging.INFO,
    format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Ensure the root logger is configured exactly once.
    """

    if logging.getLogger().handlers:
        # Respect any user provided configuration.
        return

    logging.basicConfig(
        level=level,
        format=format or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(stream if stream is not None else sys.stdout)],
    )
