"""Package logger setup.

Library modules log through ``logging.getLogger(__name__)`` and never print.
The CLI installs a single stderr handler on the package logger.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "archiveview"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, stream=None) -> logging.Logger:
    """Install the package stderr handler once and set its level."""
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if verbose else logging.WARNING
    for handler in logger.handlers:
        if getattr(handler, "_is_archiveview_handler", False):
            handler.setLevel(level)
            logger.setLevel(level)
            return logger

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler._is_archiveview_handler = True
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    # stop at package boundary so host applications do not log twice
    logger.propagate = False
    return logger

