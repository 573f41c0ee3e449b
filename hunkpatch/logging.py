import logging
import sys

LOGGER_NAME = "hunkpatch"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Attach a stderr handler to the package logger.

    Propagation is turned off so host applications that configure the root
    logger do not print every record twice. Calling this again only updates
    the level.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    if not any(h.get_name() == LOGGER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.set_name(LOGGER_NAME)
        logger.addHandler(handler)

    return logger

