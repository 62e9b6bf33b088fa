"""
Logging setup.

All modules share the same handler and format so realtime and REST logs
interleave readably on one stream.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Return a logger with a single stream handler attached."""
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
        log.setLevel(level)
        log.propagate = False
    return log


logger = setup_logger("chat_relay")
