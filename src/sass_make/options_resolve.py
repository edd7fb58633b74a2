# src/sass_make/options_resolve.py
"""Turn sparse command-line intent into a complete, consistent configuration.

Every rule below is a small pure function that returns either its value or a
ResolutionError; `resolve_options` chains them in a fixed order and stops at
the first error. Nothing here touches the filesystem: relative paths are
anchored to the injected `cwd` with string operations only.
"""

import os
from pathlib import Path

from .constants import DEPENDS_SUFFIX, SOURCE_MAP_SUFFIX, STDIO_TOKEN, STDOUT_PSEUDO_PATH
from .options_types import (
    ABSENT,
    CssTarget,
    DependsConfig,
    FilePath,
    Location,
    RawOptions,
    ResolutionError,
    ResolvedConfig,
    SourceMapConfig,
    Stdio,
    Suppressed,
)


# --------------------------------------------------------------------------- #
# helpers
# --------------------------------------------------------------------------- #


def _absolute(path: Path | str, cwd: Path) -> Path:
    """Anchor `path` to `cwd` and normalize it without touching the disk."""
    return Path(os.path.normpath(os.path.join(cwd, path)))


def _parse_output(value: str) -> Location:
    if value == STDIO_TOKEN:
        return Stdio("stdout")
    return FilePath(Path(value))


def _with_suffix(dest: CssTarget, suffix: str) -> FilePath | None:
    """Append `suffix` to the CSS file name, or None if there is no file."""
    if not isinstance(dest, FilePath):
        return None
    return FilePath(Path(f"{dest.path}{suffix}"))


def _describe_css(dest: CssTarget) -> str:
    if isinstance(dest, Suppressed):
        return "CSS output is disabled with --no-css"
    if isinstance(dest, Stdio):
        return "CSS output is being written to standard output"
    return f"CSS output is written to {dest.path}"


# --------------------------------------------------------------------------- #
# (a) + (b): source and destination
# --------------------------------------------------------------------------- #


def _normalize_source(raw: RawOptions) -> Location | ResolutionError:
    if not raw.source:
        return ResolutionError("missing required parameter: SOURCE", "SOURCE")
    if raw.source == STDIO_TOKEN:
        return Stdio("stdin")
    return FilePath(Path(raw.source))


def _normalize_dest(raw: RawOptions) -> CssTarget | ResolutionError:
    if raw.no_css:
        return Suppressed()
    if not raw.dest:
        return ResolutionError(
            "missing required parameter: DEST (or alternatively --no-css)",
            "DEST",
            "--no-css",
        )
    return _parse_output(raw.dest)


# --------------------------------------------------------------------------- #
# (c): source map
# --------------------------------------------------------------------------- #


def _resolve_map_destination(
    raw: RawOptions,
    dest: CssTarget,
) -> Location | None | ResolutionError:
    """Where the map file goes; None means it is embedded in the CSS."""
    if raw.source_map is not ABSENT and raw.source_map_inline:
        return ResolutionError(
            "The options --source-map and --source-map-inline "
            "are mutually exclusive.",
            "--source-map",
            "--source-map-inline",
        )
    if raw.source_map_inline:
        return None

    if not raw.source_map:
        derived = _with_suffix(dest, SOURCE_MAP_SUFFIX)
        if derived is None:
            return ResolutionError(
                "No file name given to --source-map and no destination CSS "
                f"file ({_describe_css(dest)}), can not deduce a source map "
                "file name. Either use --source-map-inline or specify a path.",
                "--source-map",
            )
        return derived

    assert isinstance(raw.source_map, str)  # noqa: S101
    return _parse_output(raw.source_map)


def _resolve_map_base(
    raw: RawOptions,
    dest: CssTarget,
    cwd: Path,
) -> Path | ResolutionError:
    if raw.source_map_base:
        return _absolute(raw.source_map_base, cwd)
    if not isinstance(dest, FilePath):
        return ResolutionError(
            "Can not deduce a value for --source-map-base: "
            f"{_describe_css(dest)}.",
            "--source-map-base",
        )
    return _absolute(dest.path, cwd).parent


def _resolve_map_root(
    raw: RawOptions,
    source: Location,
    map_location: CssTarget,
    cwd: Path,
) -> str | ResolutionError:
    """Relative path from the map's directory to the source's directory.

    `map_location` is the file the map lives in: the map file itself, or the
    CSS file when the map is inline.
    """
    if raw.source_map_root:
        return raw.source_map_root
    if not isinstance(source, FilePath):
        return ResolutionError(
            "Can not deduce a value for --source-map-root: "
            "the source is being read from standard input.",
            "--source-map-root",
        )
    if not isinstance(map_location, FilePath):
        if isinstance(map_location, Stdio):
            where = "the source map is being written to standard output"
        else:
            where = f"there is no file to hold the source map ({_describe_css(map_location)})"
        return ResolutionError(
            f"Can not deduce a value for --source-map-root: {where}.",
            "--source-map-root",
        )
    source_dir = _absolute(source.path, cwd).parent
    map_dir = _absolute(map_location.path, cwd).parent
    return os.path.relpath(source_dir, map_dir)


def _resolve_source_map(
    raw: RawOptions,
    source: Location,
    dest: CssTarget,
    cwd: Path,
) -> SourceMapConfig | None | ResolutionError:
    if raw.source_map is ABSENT and not raw.source_map_inline:
        return None

    destination = _resolve_map_destination(raw, dest)
    if isinstance(destination, ResolutionError):
        return destination

    base = _resolve_map_base(raw, dest, cwd)
    if isinstance(base, ResolutionError):
        return base

    map_location = dest if destination is None else destination
    root = _resolve_map_root(raw, source, map_location, cwd)
    if isinstance(root, ResolutionError):
        return root

    output_filename = (
        dest.path.name if isinstance(dest, FilePath) else STDOUT_PSEUDO_PATH
    )
    return SourceMapConfig(
        inline=raw.source_map_inline,
        destination=destination,
        include_sources=raw.source_map_include_source,
        base=base,
        root=root,
        url=raw.source_map_url or None,
        output_filename=output_filename,
    )


# --------------------------------------------------------------------------- #
# (d): dependency file
# --------------------------------------------------------------------------- #


def _resolve_depends_destination(
    raw: RawOptions,
    dest: CssTarget,
) -> Location | ResolutionError:
    if not raw.depends:
        derived = _with_suffix(dest, DEPENDS_SUFFIX)
        if derived is None:
            return ResolutionError(
                "No file name given to --depends and no destination CSS file "
                f"({_describe_css(dest)}). Please specify a path.",
                "--depends",
            )
        return derived

    assert isinstance(raw.depends, str)  # noqa: S101
    return _parse_output(raw.depends)


def _resolve_depends_target(
    raw: RawOptions,
    dest: CssTarget,
) -> str | ResolutionError:
    if raw.depends_target:
        return raw.depends_target
    if not isinstance(dest, FilePath):
        return ResolutionError(
            "Dependency tracking is enabled but no --depends-target is given "
            f"and there is no destination CSS file ({_describe_css(dest)}).",
            "--depends-target",
        )
    return str(dest.path)


def _resolve_depends(
    raw: RawOptions,
    dest: CssTarget,
) -> DependsConfig | None | ResolutionError:
    # given-but-empty is an error even when --depends is absent
    if raw.depends_target is not None and not raw.depends_target:
        return ResolutionError(
            "Option --depends-target must have a value.",
            "--depends-target",
        )
    if raw.depends is ABSENT:
        return None

    destination = _resolve_depends_destination(raw, dest)
    if isinstance(destination, ResolutionError):
        return destination

    target = _resolve_depends_target(raw, dest)
    if isinstance(target, ResolutionError):
        return target

    return DependsConfig(destination=destination, phony=raw.depends_phony, target=target)


# --------------------------------------------------------------------------- #
# (e): standard output arbitration
# --------------------------------------------------------------------------- #


def _check_stdout_conflicts(config: ResolvedConfig) -> ResolutionError | None:
    bound = config.stdout_bindings()
    if len(bound) > 1:
        return ResolutionError(
            "You tried to use standard output for more than one type of "
            f"output ({', '.join(bound)}). This is not supported.",
            *bound,
        )
    return None


# --------------------------------------------------------------------------- #
# public API
# --------------------------------------------------------------------------- #


def resolve_options(raw: RawOptions, cwd: Path) -> ResolvedConfig | ResolutionError:
    """Resolve `raw` against `cwd`.

    Returns the fully populated configuration, or the first ResolutionError
    encountered. The error is returned, not raised.
    """
    source = _normalize_source(raw)
    if isinstance(source, ResolutionError):
        return source

    dest = _normalize_dest(raw)
    if isinstance(dest, ResolutionError):
        return dest

    source_map = _resolve_source_map(raw, source, dest, cwd)
    if isinstance(source_map, ResolutionError):
        return source_map

    depends = _resolve_depends(raw, dest)
    if isinstance(depends, ResolutionError):
        return depends

    config = ResolvedConfig(
        source=source,
        dest=dest,
        cwd=cwd,
        include_dirs=tuple(_absolute(d, cwd) for d in raw.include_dirs),
        source_map=source_map,
        depends=depends,
        output_style=raw.output_style,
    )

    conflict = _check_stdout_conflicts(config)
    if conflict is not None:
        return conflict
    return config


def resolve_options_or_raise(raw: RawOptions, cwd: Path) -> ResolvedConfig:
    result = resolve_options(raw, cwd)
    if isinstance(result, ResolutionError):
        raise result
    return result
