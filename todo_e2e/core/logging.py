"""Logging setup shared by the ``todo-e2e`` CLI and the pytest session."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Handlers added by configure_logging; anything else on the root logger
# (pytest's capture handlers, for one) is left in place.
_installed: List[logging.Handler] = []


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO, logfile: Optional[Path] = None) -> None:
    """Log to stderr and, when ``logfile`` is given, append to that file as well.

    Unknown level names fall back to ``INFO``. Calling this again closes the
    handlers from the previous call before installing new ones.
    """
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile is not None:
        path = Path(logfile)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _installed.append(handler)


__all__ = ["LOG_FORMAT", "configure_logging"]
