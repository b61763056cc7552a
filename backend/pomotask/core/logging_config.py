# backend/pomotask/core/logging_config.py

import logging

_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Install one stream handler on the "pomotask" logger.
    Safe to call more than once (lifespan restarts, scripts).
    """
    logger = logging.getLogger("pomotask")
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
