import logging
import sys

from linestage.config import env_log_level

LOGGER_NAME = "linestage"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int | None = None) -> logging.Logger:
    """
    Attach a stderr handler to the package logger.

    The level defaults to LINESTAGE_LOG_LEVEL (WARNING when unset).
    Calling it again replaces the previous handler.
    Records do not propagate to the root logger.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level if level is not None else env_log_level())
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
