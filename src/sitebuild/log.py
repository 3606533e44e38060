"""Logging setup for the sitebuild logger tree"""

import logging


LOGGER_NAME = "sitebuild"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Install one stderr handler on the sitebuild logger, replacing any earlier one; DEBUG when verbose."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(logger.handlers):
        if getattr(handler, "_sitebuild", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._sitebuild = True
    logger.addHandler(handler)
    return logger
