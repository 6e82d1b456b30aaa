from __future__ import annotations

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Install one stdout handler on the root logger. Later calls only change the level."""
    global _configured
    root = logging.getLogger()
    if isinstance(level, str):
        level = level.upper()
    root.setLevel(level)
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True
