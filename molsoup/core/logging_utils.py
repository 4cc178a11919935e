from __future__ import annotations

import logging
from typing import Optional

from molsoup.config import load_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; the root gets a handler on first use."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=load_settings().log_level, format=LOG_FORMAT)
    return logger


def configure_logging(level: Optional[str] = None) -> None:
    """Set the level of every molsoup logger (e.g. from a CLI flag)."""
    level = (level or load_settings().log_level).upper()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("molsoup").setLevel(level)
