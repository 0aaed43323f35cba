"""Logging utilities for the acmelite command line.

Library modules only create loggers; handlers are installed here, once,
by the entry point.

"""
import logging
import sys

from acmelite import constants

# Logging format
CLI_FMT = "%(message)s"
FILE_FMT = "%(asctime)s:%(levelname)s:%(name)s:%(message)s"


def setup_logging(config) -> logging.Handler:
    """Send log records to stderr at the level chosen on the command line.

    ``-v`` adds wire-level detail with the more verbose `FILE_FMT`;
    ``-q`` limits output to warnings and errors.

    :returns: The installed handler.

    """
    if config.quiet:
        level = constants.QUIET_LOGGING_LEVEL
    else:
        level = -config.verbose_count * 10
    level = max(level, logging.DEBUG)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        FILE_FMT if level < logging.INFO else CLI_FMT))
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    # urllib3 chatter duplicates what acmelite.transport already logs
    logging.getLogger('urllib3').setLevel(max(level, logging.INFO))
    return handler
