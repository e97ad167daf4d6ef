# src/megastock/core/logger.py
import logging

from megastock.core.config import Settings

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Installs a single console handler on the ``megastock`` logger.
    Calling it twice does not duplicate handlers.
    """
    logger = logging.getLogger("megastock")
    logger.setLevel("DEBUG" if settings.debug else settings.log_level.upper())

    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)
    return logger
