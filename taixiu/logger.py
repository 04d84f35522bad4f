# Cấu hình log dùng chung cho API, CLI và engine: get_logger(__name__)

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def setup_logging(level: str = "INFO") -> None:
    # một stream handler duy nhất cho cây logger "taixiu"
    global _configured
    root = logging.getLogger("taixiu")
    root.setLevel(level.upper())
    if _configured:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    if not name.startswith("taixiu"):
        name = f"taixiu.{name}"
    return logging.getLogger(name)
