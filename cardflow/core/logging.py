#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Logging setup for Cardflow.

Everything logs under the "cardflow" namespace. Console output goes through
rich on stderr so it never mixes with command output on stdout; the
optional log file gets plain timestamped lines.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "cardflow"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def default_log_file(log_dir: Optional[Path] = None) -> Path:
    """Timestamped log file name inside log_dir (./logs when unset)."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(log_dir or "logs") / f"{ROOT_LOGGER}_{stamp}.log"


def setup_logging(
    name: str = ROOT_LOGGER,
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    log_to_console: bool = True,
    log_to_file: bool = False,
    log_dir: Optional[Path] = None
) -> logging.Logger:
    """
    Configure a logger, replacing any handlers it already has.

    Args:
        name: Logger to configure
        level: Level for the logger and its handlers
        log_file: Explicit log file; defaults to default_log_file(log_dir)
        log_to_console: Attach a rich console handler on stderr
        log_to_file: Attach a file handler
        log_dir: Directory for the default log file

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = []

    if log_to_console:
        console = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
        )
        console.setLevel(level)
        logger.addHandler(console)

    if log_to_file:
        path = Path(log_file) if log_file is not None else default_log_file(log_dir)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(handler)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Logger for a module; pass __name__ so it nests under cardflow."""
    return logging.getLogger(name)
