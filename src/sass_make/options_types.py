# src/sass_make/options_types.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal, Union

from .constants import DEFAULT_OUTPUT_STYLE


StdStream = Literal["stdin", "stdout"]


class _Absent(Enum):
    ABSENT = "absent"

    def __repr__(self) -> str:
        return "ABSENT"


# Option was not passed at all (as opposed to passed without a value).
ABSENT = _Absent.ABSENT


# --------------------------------------------------------------------------- #
# Destinations
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class FilePath:
    """A concrete filesystem location, kept exactly as the user wrote it."""

    path: Path

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class Stdio:
    """A location bound to one of the process's standard streams."""

    stream: StdStream

    def __str__(self) -> str:
        return f"<{self.stream}>"


@dataclass(frozen=True)
class Suppressed:
    """CSS output explicitly disabled with --no-css."""

    def __str__(self) -> str:
        return "<no css>"


Location = Union[FilePath, Stdio]
CssTarget = Union[FilePath, Stdio, Suppressed]


def is_stdout(location: CssTarget | None) -> bool:
    return isinstance(location, Stdio) and location.stream == "stdout"


# --------------------------------------------------------------------------- #
# Raw (sparse) options
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class RawOptions:
    """User intent as given on the command line.

    `source_map` and `depends` have three states: ABSENT (not requested),
    None (requested, path to be derived), or a string ("-" for stdout).
    `depends_target` is None when absent; an empty string means the option
    was given without a usable value.
    """

    source: str | None = None
    dest: str | None = None
    no_css: bool = False
    include_dirs: tuple[str, ...] = ()

    # source map generation
    source_map: str | None | _Absent = ABSENT
    source_map_inline: bool = False
    source_map_include_source: bool = False
    source_map_root: str | None = None
    source_map_base: str | None = None
    source_map_url: str | None = None

    # dependency tracking
    depends: str | None | _Absent = ABSENT
    depends_phony: bool = False
    depends_target: str | None = None

    # compiler
    output_style: str = DEFAULT_OUTPUT_STYLE


# --------------------------------------------------------------------------- #
# Resolved configuration
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class SourceMapConfig:
    inline: bool
    destination: Location | None  # None when embedded in the CSS
    include_sources: bool
    base: Path  # absolute; anchors the sourceMappingURL written into the CSS
    root: str  # from the map's directory to the source's directory
    url: str | None
    output_filename: str  # CSS file name recorded in the map


@dataclass(frozen=True)
class DependsConfig:
    destination: Location
    phony: bool
    target: str


@dataclass(frozen=True)
class ResolvedConfig:
    source: Location
    dest: CssTarget
    cwd: Path
    include_dirs: tuple[Path, ...] = ()
    source_map: SourceMapConfig | None = None
    depends: DependsConfig | None = None
    output_style: str = DEFAULT_OUTPUT_STYLE

    def stdout_bindings(self) -> list[str]:
        """Name every output channel bound to standard output."""
        bound: list[str] = []
        if is_stdout(self.dest):
            bound.append("CSS output")
        if self.source_map is not None and is_stdout(self.source_map.destination):
            bound.append("source map")
        if self.depends is not None and is_stdout(self.depends.destination):
            bound.append("dependency file")
        return bound


# --------------------------------------------------------------------------- #
# Errors
# --------------------------------------------------------------------------- #


class UsageError(ValueError):
    """Malformed command line; reported together with the usage text."""


class ResolutionError(ValueError):
    """Options are syntactically valid but cannot be made consistent.

    `options` names the command-line flags involved, for callers that want
    to point at them.
    """

    def __init__(self, message: str, *options: str) -> None:
        super().__init__(message)
        self.message = message
        self.options = options
