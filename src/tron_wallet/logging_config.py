"""Logging setup for the wallet CLI.

Console records go to stderr through rich so they do not interleave with the
menu on stdout. A log file, when configured, receives plain single-line
records.

Usage:
    from tron_wallet.logging_config import setup_logging
    setup_logging(level="DEBUG", log_file="tron-wallet.log")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[Path | str] = None,
) -> logging.Logger:
    """Configure the ``tron_wallet`` logger tree.

    Calling it again replaces the handlers installed by an earlier call.
    Returns the package logger.
    """
    logger = logging.getLogger("tron_wallet")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    shutdown_logging()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def shutdown_logging() -> None:
    """Flush and detach every handler on the package logger."""
    logger = logging.getLogger("tron_wallet")
    for handler in list(logger.handlers):
        handler.flush()
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
