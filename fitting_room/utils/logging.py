"""Logging configuration."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler to the package logger.
    
    Safe to call more than once; handlers are only added the first time.
    """
    logger = logging.getLogger("fitting_room")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    
    if logger.handlers:
        return logger
    
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
