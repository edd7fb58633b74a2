# src/sass_make/logs.py

import logging
from typing import cast

from .meta import PROGRAM_PACKAGE
from .utils_logs import ApatheticCLILogger


class AppLogger(ApatheticCLILogger):
    """App-specific logger class."""


# --- Logger initialization ---------------------------------------------------

# Force the logging module to use the AppLogger class globally.
# This must happen *before* any loggers are created.
AppLogger.extend_logging_module()

_APP_LOGGER = cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))


# --- Convenience utils ---------------------------------------------------------


def get_app_logger() -> AppLogger:
    """Return the configured app logger.

    The CLI hands this logger to the compiler as its log sink; library
    callers may pass any logging.Logger instead.
    """
    return _APP_LOGGER
