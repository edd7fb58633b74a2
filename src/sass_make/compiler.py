# src/sass_make/compiler.py
"""Adapter around libsass: options in, CSS + source map + import list out."""

import base64
import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypedDict

import sass
from typing_extensions import NotRequired

from .constants import (
    IMPORT_EXTENSIONS,
    PLAIN_CSS_IMPORT_PREFIXES,
    SOURCE_MAP_SUFFIX,
    STDIN_PSEUDO_PATH,
)
from .options_types import FilePath, ResolvedConfig, SourceMapConfig
from .utils_logs import TRACE_LEVEL


class CompileError(RuntimeError):
    """The stylesheet compiler rejected the input; message is passed through."""


@dataclass
class CompileResult:
    css: str
    source_map: str | None = None
    imports: list[str] = field(default_factory=list)


class SassCompileOptions(TypedDict):
    """Keyword bundle handed to sass.compile()."""

    output_style: str
    include_paths: list[str]
    importers: list[tuple[int, Callable[..., Any]]]
    source_map_filename: NotRequired[str]
    source_map_contents: NotRequired[bool]
    omit_source_map_url: NotRequired[bool]
    output_filename_hint: NotRequired[str]


# --------------------------------------------------------------------------- #
# import tracking
# --------------------------------------------------------------------------- #


def is_plain_css_import(name: str) -> bool:
    """True for imports libsass leaves in the CSS instead of loading."""
    return name.endswith(".css") or name.startswith(PLAIN_CSS_IMPORT_PREFIXES)


def _import_candidates(name: str) -> list[Path]:
    """File names libsass tries for `@import name`, in its lookup order."""
    path = Path(name)
    parent, base = path.parent, path.name
    if path.suffix in IMPORT_EXTENSIONS:
        return [parent / f"_{base}", parent / base]
    candidates = [
        parent / f"{prefix}{base}{ext}"
        for ext in IMPORT_EXTENSIONS
        for prefix in ("_", "")
    ]
    candidates += [
        path / f"{prefix}index{ext}"
        for ext in IMPORT_EXTENSIONS
        for prefix in ("_", "")
    ]
    return candidates


def find_import(name: str, prev: str, search_paths: list[Path]) -> Path | None:
    """Locate the file libsass will load for `@import name` seen in `prev`.

    Lookup starts next to the importing file, then walks `search_paths`.
    Returns None when nothing matches (libsass will report the failure).
    """
    dirs: list[Path] = []
    prev_path = Path(prev)
    if prev_path.is_absolute():
        dirs.append(prev_path.parent)
    dirs.extend(search_paths)

    for directory in dirs:
        for candidate in _import_candidates(name):
            full = directory / candidate
            if full.is_file():
                return Path(os.path.normpath(full))
    return None


def _display_path(path: Path, cwd: Path) -> str:
    """Relative to cwd when the file lives below it, else absolute."""
    try:
        return str(path.relative_to(cwd))
    except ValueError:
        return str(path)


class ImportRecorder:
    """libsass importer that only observes; returning None lets libsass load."""

    def __init__(
        self,
        search_paths: list[Path],
        cwd: Path,
        logger: logging.Logger,
    ) -> None:
        self.search_paths = search_paths
        self.cwd = cwd
        self.logger = logger
        self.imports: list[str] = []

    def __call__(self, path: str, prev: str) -> None:
        if is_plain_css_import(path):
            self.logger.debug("Plain CSS import %r kept as @import", path)
            return None
        found = find_import(path, prev, self.search_paths)
        if found is None:
            self.logger.debug("Unresolved import %r from %s", path, prev)
            return None
        display = _display_path(found, self.cwd)
        self.logger.debug("Import %r -> %s", path, display)
        self.imports.append(display)
        return None


# --------------------------------------------------------------------------- #
# compile
# --------------------------------------------------------------------------- #


def _source_file(config: ResolvedConfig) -> Path | None:
    if not isinstance(config.source, FilePath):
        return None
    return Path(os.path.normpath(config.cwd / config.source.path))


def search_paths_for(config: ResolvedConfig) -> list[Path]:
    """The source's own directory first (if it has one), then -I dirs."""
    paths: list[Path] = []
    source_file = _source_file(config)
    if source_file is not None:
        paths.append(source_file.parent)
    paths.extend(config.include_dirs)
    return paths


def _map_file_for(config: ResolvedConfig, sm: SourceMapConfig) -> Path:
    """Absolute map path libsass should compute relative sources against."""
    if isinstance(sm.destination, FilePath):
        return Path(os.path.normpath(config.cwd / sm.destination.path))
    if isinstance(config.dest, FilePath):
        css = Path(os.path.normpath(config.cwd / config.dest.path))
        return css.with_name(css.name + SOURCE_MAP_SUFFIX)
    return config.cwd / (sm.output_filename.lstrip("/") + SOURCE_MAP_SUFFIX)


def source_mapping_url(config: ResolvedConfig) -> str | None:
    """URL written into the CSS for an external map, or None to omit it."""
    sm = config.source_map
    if sm is None or sm.inline:
        return None
    if sm.url:
        return sm.url
    if not isinstance(sm.destination, FilePath):
        return None
    return Path(os.path.relpath(_map_file_for(config, sm), sm.base)).as_posix()


def build_sass_options(
    config: ResolvedConfig,
    importer: Callable[..., Any],
) -> SassCompileOptions:
    options: SassCompileOptions = {
        "output_style": config.output_style,
        "include_paths": [str(p) for p in search_paths_for(config)],
        "importers": [(0, importer)],
    }
    sm = config.source_map
    if sm is not None:
        options["source_map_filename"] = str(_map_file_for(config, sm))
        options["source_map_contents"] = sm.include_sources
        # sourceMappingURL (file or data:) is appended after rebasing the map
        options["omit_source_map_url"] = True
        if isinstance(config.dest, FilePath):
            options["output_filename_hint"] = str(
                Path(os.path.normpath(config.cwd / config.dest.path))
            )
        else:
            options["output_filename_hint"] = str(
                config.cwd / sm.output_filename.lstrip("/")
            )
    return options


def rebase_source_map(
    map_text: str,
    map_file: Path,
    source_dir: Path,
    root: str,
) -> str:
    """Make `sources` relative to `source_dir` and record `root` as sourceRoot.

    libsass writes sources relative to the map file. Consumers resolve
    ``sourceRoot + "/" + source`` against the map's directory, and `root`
    already leads from there to `source_dir`.
    """
    data = json.loads(map_text)
    data["sources"] = [
        Path(
            os.path.relpath(os.path.normpath(map_file.parent / entry), source_dir)
        ).as_posix()
        for entry in data.get("sources", [])
    ]
    data["sourceRoot"] = root
    return json.dumps(data, indent=2)


def inline_source_map_comment(map_text: str) -> str:
    encoded = base64.b64encode(map_text.encode("utf-8")).decode("ascii")
    return f"/*# sourceMappingURL=data:application/json;base64,{encoded} */"


def compile_stylesheet(
    config: ResolvedConfig,
    source_text: str | None = None,
    *,
    logger: logging.Logger,
) -> CompileResult:
    """Compile the configured source with libsass.

    File sources are compiled by name so libsass can track them; a stdin
    source must be passed in as `source_text`. Messages go to `logger` only.
    """
    source_file = _source_file(config)
    search_paths = search_paths_for(config)
    recorder = ImportRecorder(search_paths, config.cwd, logger)
    options = build_sass_options(config, recorder)

    source_name = str(config.source) if source_file is not None else STDIN_PSEUDO_PATH
    logger.debug("Compiling %s", source_name)
    logger.debug("Search paths: %s", ", ".join(options["include_paths"]) or "(none)")
    logger.log(
        TRACE_LEVEL,
        "libsass options: %r",
        {k: v for k, v in options.items() if k != "importers"},
    )

    try:
        if source_file is not None:
            output = sass.compile(filename=str(source_file), **options)
        else:
            if config.source_map is not None:
                xmsg = (
                    "Source maps need a source file: libsass can not map "
                    "a stylesheet read from standard input."
                )
                raise CompileError(xmsg)
            if source_text is None:
                xmsg = "No source text given for a standard input source."
                raise CompileError(xmsg)
            output = sass.compile(string=source_text, **options)
    except sass.CompileError as e:
        raise CompileError(str(e)) from e

    sm = config.source_map
    if sm is None or source_file is None:
        css, source_map = output, None
    else:
        css, raw_map = output
        source_map = rebase_source_map(
            raw_map,
            _map_file_for(config, sm),
            source_file.parent,
            sm.root,
        )
        if sm.inline:
            css = f"{css.rstrip()}\n{inline_source_map_comment(source_map)}"
            source_map = None

    url = source_mapping_url(config)
    if url is not None:
        css = f"{css.rstrip()}\n/*# sourceMappingURL={url} */"

    logger.debug("Compiled %s (%d import(s))", source_name, len(recorder.imports))
    return CompileResult(
        css=css.rstrip("\n"),
        source_map=source_map,
        imports=recorder.imports,
    )
