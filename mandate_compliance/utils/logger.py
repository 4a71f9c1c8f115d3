"""Centralized logging configuration.
Call setup_logging() once at application startup; library modules only
create their own loggers with logging.getLogger(__name__).
"""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(funcName)s:%(lineno)d │ %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger."""
    root = logging.getLogger()
    # Avoid duplicate handlers on repeated calls
    if root.handlers:
        return

    resolved = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(resolved)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)

    # Quiet the graph runtime but keep our code at the requested level
    logging.getLogger("langgraph").setLevel(logging.WARNING)
    logging.getLogger("langchain_core").setLevel(logging.WARNING)
