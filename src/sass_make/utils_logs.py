# src/sass_make/utils_logs.py
"""CLI logger that keeps standard output free for data.

Every record goes to stderr: stdout is reserved for whichever output
(CSS, source map, or dependency file) the user bound to it.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import suppress
from typing import Any, TextIO, cast

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV


# --- Constants ---------------------------------------------------------------

# ANSI Colors
RESET = "\033[0m"
CYAN = "\033[36m"
YELLOW = "\033[93m"
RED = "\033[91m"
GRAY = "\033[90m"

# Logger levels
TRACE_LEVEL = logging.DEBUG - 5  # libsass option dumps, logger boot
# DEBUG      - builtin # -v: search paths, imports, files written
# INFO       - builtin # default
# WARNING    - builtin
# ERROR      - builtin # -s: only failures
# CRITICAL   - builtin # internal errors
SILENT_LEVEL = logging.CRITICAL + 1

LEVEL_ORDER = [
    "trace",
    "debug",
    "info",
    "warning",
    "error",
    "critical",
    "silent",  # disables all logging
]

# level name -> (color, prefix); info lines carry no prefix
TAG_STYLES = {
    "TRACE": (GRAY, "[TRACE]"),
    "DEBUG": (CYAN, "[DEBUG]"),
    "WARNING": (YELLOW, "warning:"),
    "ERROR": (RED, "error:"),
    "CRITICAL": (RED, "fatal:"),
}

_TRUTHY = {"1", "true", "yes"}


# --- Logging that bypasses handlers ------------------------------------------


def safe_log(msg: str) -> None:
    """Write `msg` to the real stderr; used when the logger itself failed."""
    stream = cast("TextIO", sys.__stderr__)
    try:
        print(msg, file=stream)
    except Exception:  # noqa: BLE001
        # nothing left to report to
        with suppress(Exception):
            stream.write(f"[INTERNAL] {msg}\n")


# --- CLI logger --------------------------------------------------------------


class ApatheticCLILogger(logging.Logger):
    """Logger for command-line tools whose stdout may carry data.

    Adds TRACE and SILENT levels, prefixes warnings and errors the way
    compilers do (``error: ...``), and re-attaches its handler whenever
    ``sys.stderr`` is swapped out (pytest's capsys, redirected streams).
    """

    enable_color: bool = False

    _logging_module_extended: bool = False

    _bound_stderr: TextIO | None = None

    def __init__(
        self,
        name: str,
        level: int = logging.NOTSET,
        *,
        enable_color: bool | None = None,
    ) -> None:
        super().__init__(name, level)
        if self.level == logging.NOTSET:
            self.setLevel(self.determine_log_level())

        if enable_color is None:
            enable_color = type(self).determine_color_enabled()
        self.enable_color = enable_color

        # our handler is the only one; root handlers would duplicate lines
        self.propagate = False

    # --- handlers ---

    def ensure_handlers(self) -> None:
        if not self.handlers or self._bound_stderr is not sys.stderr:
            self.handlers.clear()
            handler = StderrHandler()
            handler.setFormatter(TagFormatter("%(message)s"))
            self.addHandler(handler)
            self._bound_stderr = sys.stderr

        # enable_color may be flipped after the handler exists
        for handler in self.handlers:
            if isinstance(handler, StderrHandler):
                handler.enable_color = self.enable_color

    def _log(  # type: ignore[override]
        self, level: int, msg: str, args: tuple[Any, ...], **kwargs: Any
    ) -> None:
        self.ensure_handlers()
        super()._log(level, msg, args, **kwargs)

    # --- levels ---

    def setLevel(self, level: int | str) -> None:  # noqa: N802
        """Like logging.Logger.setLevel, but accepts lowercase names."""
        if isinstance(level, str):
            level = level.upper()
        super().setLevel(level)
        # the manager only clears the isEnabledFor cache of loggers it owns
        self._cache.clear()

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.getEffectiveLevel())

    def determine_log_level(
        self,
        *,
        args: argparse.Namespace | None = None,
    ) -> str:
        """Pick the level: CLI flag, then ``<PROGRAM>_LOG_LEVEL``, then ``LOG_LEVEL``."""
        cli_level = getattr(args, "log_level", None)
        if cli_level is not None:
            return cast("str", cli_level).upper()

        for env_var in (f"{PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}", DEFAULT_ENV_LOG_LEVEL):
            env_level = os.getenv(env_var)
            if env_level:
                return env_level.upper()

        return DEFAULT_LOG_LEVEL.upper()

    @classmethod
    def determine_color_enabled(cls) -> bool:
        if "NO_COLOR" in os.environ:
            return False
        if os.getenv("FORCE_COLOR", "").lower() in _TRUTHY:
            return True
        return sys.stderr.isatty()

    @classmethod
    def extend_logging_module(cls) -> bool:
        """Register the logger class and extra levels; False if already done."""
        if cls._logging_module_extended:
            return False
        cls._logging_module_extended = True

        logging.setLoggerClass(cls)
        logging.addLevelName(TRACE_LEVEL, "TRACE")
        logging.addLevelName(SILENT_LEVEL, "SILENT")
        logging.TRACE = TRACE_LEVEL  # type: ignore[attr-defined]
        logging.SILENT = SILENT_LEVEL  # type: ignore[attr-defined]
        return True

    # --- emitting ---

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, **kwargs)

    def _log_failure(
        self, level: int, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> None:
        # a traceback is only useful to someone who asked for -v
        if self.isEnabledFor(logging.DEBUG):
            kwargs.setdefault("exc_info", True)
            kwargs.setdefault("stacklevel", 3)
            self.log(level, msg, *args, **kwargs)
        else:
            self.log(level, msg, *args)

    def error_if_not_debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an error; include the active traceback at debug level and below."""
        self._log_failure(logging.ERROR, msg, args, kwargs)

    def critical_if_not_debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Like error_if_not_debug(), at CRITICAL."""
        self._log_failure(logging.CRITICAL, msg, args, kwargs)


# --- Formatting and output ---------------------------------------------------


class TagFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        color, tag = TAG_STYLES.get(record.levelname, ("", ""))
        if not tag:
            return msg
        if color and getattr(record, "enable_color", False):
            tag = f"{color}{tag}{RESET}"
        return f"{tag} {msg}"


class StderrHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Send every record to whatever sys.stderr is at emit time."""

    enable_color: bool = False

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        record.enable_color = self.enable_color
        super().emit(record)
