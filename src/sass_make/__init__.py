# src/sass_make/__init__.py

"""Sass Make: compile Sass/SCSS into CSS with Make dependency tracking.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use or custom build integrations.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()                → CLI entrypoint
    - resolve_options()     → Turn sparse options into a ResolvedConfig
    - compile_stylesheet()  → Run libsass for a ResolvedConfig
    - generate_depends()    → Render a Makefile dependency rule
"""

from .cli import main
from .compiler import CompileError, CompileResult, compile_stylesheet
from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT_STYLE,
    DEPENDS_SUFFIX,
    SOURCE_MAP_SUFFIX,
)
from .depends import generate_depends
from .logs import AppLogger, get_app_logger
from .meta import PROGRAM_DISPLAY, PROGRAM_PACKAGE, PROGRAM_SCRIPT, get_version
from .options_resolve import resolve_options, resolve_options_or_raise
from .options_types import (
    ABSENT,
    DependsConfig,
    FilePath,
    RawOptions,
    ResolutionError,
    ResolvedConfig,
    SourceMapConfig,
    Stdio,
    Suppressed,
    UsageError,
)
from .outputs import plan_outputs, read_source, write_output, write_outputs


__all__ = [  # noqa: RUF022
    # cli
    "main",
    # compiler
    "CompileError",
    "CompileResult",
    "compile_stylesheet",
    # constants
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_OUTPUT_STYLE",
    "DEPENDS_SUFFIX",
    "SOURCE_MAP_SUFFIX",
    # depends
    "generate_depends",
    # logs
    "AppLogger",
    "get_app_logger",
    # meta
    "PROGRAM_DISPLAY",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    "get_version",
    # options
    "ABSENT",
    "DependsConfig",
    "FilePath",
    "RawOptions",
    "ResolutionError",
    "ResolvedConfig",
    "SourceMapConfig",
    "Stdio",
    "Suppressed",
    "UsageError",
    "resolve_options",
    "resolve_options_or_raise",
    # outputs
    "plan_outputs",
    "read_source",
    "write_output",
    "write_outputs",
]
