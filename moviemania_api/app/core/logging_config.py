"""
Process-wide logging for the API and the maintenance scripts.

``setup_logging`` attaches handlers to the root logger the first time
it runs; later calls (a second ``create_app`` in tests, a script that
imports the app) leave the existing configuration alone.  Every module
logs through ``logging.getLogger(__name__)``.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _file_handler(logfile: str) -> logging.Handler:
    path = Path(logfile).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf-8")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Send log records to stderr and, optionally, to ``logfile``.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"warning"``.  Unknown names
        fall back to ``INFO``.
    logfile : Optional[str]
        Extra destination for the same records; its directory is
        created when missing.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(_file_handler(logfile))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
