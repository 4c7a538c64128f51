"""
Logging setup for the console client.

``setup_logging`` attaches a console handler (and, when a log file is
configured, a file handler) to the root logger.  Records carry the
timestamp, logger name and level.  The console prints views to stdout,
so log output goes to stderr and never interleaves with a rendered
view.  Repeated calls are ignored.
"""

import logging
from pathlib import Path
from typing import Optional

from student_directory.app.core.config import settings


def setup_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : Optional[str]
        Logging level name (e.g. ``"DEBUG"``).  Case insensitive;
        unknown names fall back to ``INFO``.  Defaults to
        ``settings.log_level``.
    logfile : Optional[str]
        File to append log records to.  Defaults to
        ``settings.log_file``; no file handler when neither is set.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    numeric_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stderr_handler = logging.StreamHandler()
    stderr_handler.setFormatter(formatter)
    root.addHandler(stderr_handler)

    logfile = logfile or settings.log_file
    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # httpx logs every request at INFO.
    if numeric_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
