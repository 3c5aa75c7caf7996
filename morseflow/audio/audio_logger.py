"""Debug logger configuration.

This module configures a **single** file-backed logger for the whole
``morseflow`` package (timing, playback engine, tone devices and the
front ends).  Modules log through ``logging.getLogger(__name__)`` and
their records propagate up to the ``morseflow`` logger set up here.

Goals
-----
- Write to ``morseflow_debug.log`` in the current directory unless a
  path is given explicitly or through ``MORSEFLOW_LOG``.
- Be idempotent (safe to call multiple times).
- Work even if other parts of the app already configured logging.
- Emit a visible *startup* entry so users can confirm the log is active.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import Lock
from typing import Optional, Union

_LOCK = Lock()
_CONFIGURED = False

LOGGER_NAME = "morseflow"
DEFAULT_LOG_FILE = "morseflow_debug.log"


def get_log_path(path: Optional[Union[str, os.PathLike]] = None) -> Path:
    """Return the absolute path of the debug log.

    Precedence: explicit *path*, then ``MORSEFLOW_LOG``, then
    :data:`DEFAULT_LOG_FILE` in the working directory.
    """
    if path is None:
        path = os.environ.get("MORSEFLOW_LOG") or DEFAULT_LOG_FILE
    return Path(path).expanduser().resolve()


def configure_logger(
    path: Optional[Union[str, os.PathLike]] = None,
    level: Union[int, str] = logging.DEBUG,
    force: bool = False,
) -> logging.Logger:
    """Configure the package logger and return it.

    Parameters
    ----------
    path:
        Log file location, see :func:`get_log_path`.
    level:
        Level for the logger and its file handler.
    force:
        If True, adds a fresh FileHandler and writes a startup line even
        if the logger seems configured already.

    Returns
    -------
    logging.Logger
        The configured logger named ``morseflow``.
    """
    global _CONFIGURED

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.DEBUG

    with _LOCK:
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(level)
        logger.propagate = False

        log_path = str(get_log_path(path))

        has_matching_file_handler = False
        for h in list(logger.handlers):
            if isinstance(h, logging.FileHandler):
                if os.path.abspath(getattr(h, "baseFilename", "")) == log_path:
                    has_matching_file_handler = True
                    h.setLevel(level)
                    break

        if force or not has_matching_file_handler:
            fh = logging.FileHandler(log_path, mode="a", encoding="utf-8", delay=False)
            fh.setLevel(level)
            fh.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            logger.addHandler(fh)

        # Startup entry: once per process unless forced.
        if force or not _CONFIGURED:
            logger.info("=== MorseFlow logging started (pid=%s) ===", os.getpid())
            for h in logger.handlers:
                h.flush()
            _CONFIGURED = True

        return logger


__all__ = ["LOGGER_NAME", "get_log_path", "configure_logger"]
