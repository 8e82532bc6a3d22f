# === FILE: seo_scout/logger.py ===
"""Logging setup for **SEO Scout**.

Every module logs through a child of one project logger::

    from seo_scout.logger import get_logger
    log = get_logger("crawler")        # -> "SEOScout.crawler"
    log.info("Crawling: %s", url)

Records go to stderr (stdout carries the JSON report printed by the CLI) and,
if requested, to a size-rotated file. The initial level comes from the
``SEO_SCOUT_LOG_LEVEL`` environment variable; the CLI and the API server call
:func:`init_logging` again with their own options.
"""
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable, Union

PROJECT_LOGGER: Final[str] = "SEOScout"
LEVEL_ENV: Final[str] = "SEO_SCOUT_LOG_LEVEL"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# сторонние логгеры, которые на INFO шумят каждым запросом
NOISY_LOGGERS: Final[tuple[str, ...]] = ("aiohttp.access", "asyncio")

_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3

LevelT = Union[int, str]


def _handlers(log_file: str | Path | None, fmt: str) -> Iterable[logging.Handler]:
    formatter = logging.Formatter(fmt)
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    yield console
    if log_file is not None:
        rotating = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=_MAX_LOG_BYTES,
            backupCount=_LOG_BACKUPS,
            encoding="utf-8",
        )
        rotating.setFormatter(formatter)
        yield rotating


def configure(
    *,
    level: LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the project logger.

    Parameters
    ----------
    level
        Numeric or textual level (``"DEBUG"``, ``logging.INFO`` ...).
    log_file
        Extra rotating log file; *None* keeps output on stderr only.
    log_format
        Format string for :class:`logging.Formatter`.
    replace_handlers
        Drop previously installed handlers first (default) or add to them.
    """
    project = logging.getLogger(PROJECT_LOGGER)
    project.setLevel(level)
    if replace_handlers:
        for old in list(project.handlers):
            project.removeHandler(old)
            old.close()
    for handler in _handlers(log_file, log_format):
        project.addHandler(handler)
    project.propagate = False

    # библиотеки не опускаются ниже WARNING, пока не включён DEBUG
    library_level = logging.DEBUG if project.level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
    return project


def init_logging(
    level: LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Entry point for the CLI and the API server: fresh handlers, given options."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


def get_logger(name: str) -> logging.Logger:
    """Child of the project logger, e.g. ``get_logger("robots")`` -> ``SEOScout.robots``."""
    return logging.getLogger(f"{PROJECT_LOGGER}.{name}")


logger: logging.Logger = init_logging(os.environ.get(LEVEL_ENV, "INFO").upper())

__all__ = ["logger", "configure", "init_logging", "get_logger", "PROJECT_LOGGER", "NOISY_LOGGERS"]
