"""Central logging configuration for the converter."""
from __future__ import annotations

import logging
from typing import Optional

_DEFAULT_LEVEL = logging.INFO
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger, configuring the root handler on first use."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=_DEFAULT_LEVEL, format=_LOG_FORMAT)
    return logger


def set_verbosity(verbose: bool) -> None:
    """Switch the package loggers between INFO and DEBUG output."""
    level = logging.DEBUG if verbose else _DEFAULT_LEVEL
    logging.getLogger("docx_pdf").setLevel(level)
