from __future__ import annotations
import logging
import os
from typing import Optional

from rich.logging import RichHandler

_CONFIGURED = False


def setup_logging(level: Optional[str] = None) -> None:
    """Route root logging through rich. Level: argument, then $LOG_LEVEL, then INFO.
    Safe to call more than once; only the first call installs the handler.
    """
    global _CONFIGURED
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    lvl = logging.getLevelName(name)
    if not isinstance(lvl, int):
        lvl = logging.INFO
    root = logging.getLogger()
    root.setLevel(lvl)
    if _CONFIGURED:
        return
    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s  %(message)s"))
    root.addHandler(handler)
    _CONFIGURED = True
