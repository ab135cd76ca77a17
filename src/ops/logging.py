"""
Logging setup.

Worker threads log through the same root logger as the control thread, so
the thread name is part of every record.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(threadName)s - %(levelname)s - %(message)s"


def setup_logging(log_path: Optional[str], log_level: str, console: bool = True) -> None:
    """
    Configure the root logger.

    Args:
        log_path: Log file; None logs to the console only.
        log_level: Level name (DEBUG prints one line per stage per frame).
        console: Also log to stderr.
    """
    handlers: List[logging.Handler] = []
    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(logging.FileHandler(log_path))
    if console or not handlers:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
