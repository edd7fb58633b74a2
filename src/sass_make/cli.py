# src/sass_make/cli.py

import argparse
import logging
import platform
import sys
from difflib import get_close_matches
from pathlib import Path
from typing import NoReturn

from .compiler import CompileError, compile_stylesheet
from .constants import (
    DEFAULT_OUTPUT_STYLE,
    OUTPUT_STYLES,
    SILENT_LOG_LEVEL,
    VERBOSE_LOG_LEVEL,
)
from .logs import AppLogger, get_app_logger
from .meta import PROGRAM_DESCRIPTION, PROGRAM_DISPLAY, PROGRAM_SCRIPT, get_version
from .options_resolve import resolve_options
from .options_types import (
    ABSENT,
    FilePath,
    RawOptions,
    ResolutionError,
    ResolvedConfig,
    UsageError,
)
from .outputs import plan_outputs, read_source, write_outputs
from .utils_logs import LEVEL_ORDER, TAG_STYLES, safe_log


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    """Raise UsageError instead of exiting, with did-you-mean hints."""

    def error(self, message: str) -> NoReturn:
        # Build known option strings: ["-v", "--verbose", "--depends", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-") and tok != "-"]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        full = message
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        raise UsageError(full)


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(
        prog=PROGRAM_SCRIPT,
        description=PROGRAM_DESCRIPTION,
        usage=(
            f"{PROGRAM_SCRIPT} [options] SOURCE DEST\n"
            f"       {PROGRAM_SCRIPT} [options] --no-css SOURCE"
        ),
        add_help=False,
    )

    # --- Positionals ---
    parser.add_argument(
        "source",
        nargs="?",
        metavar="SOURCE",
        help="Stylesheet to compile, or '-' to read standard input.",
    )
    parser.add_argument(
        "dest",
        nargs="?",
        metavar="DEST",
        help="CSS file to write, or '-' for standard output.",
    )

    # --- General ---
    general = parser.add_argument_group("Options")
    general.add_argument("-h", "--help", action="store_true", help="Show this help.")
    general.add_argument("--version", action="store_true", help="Show version info.")

    log_level = general.add_mutually_exclusive_group()
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const=VERBOSE_LOG_LEVEL,
        dest="log_level",
        help="Show verbose output.",
    )
    log_level.add_argument(
        "-s",
        "--silent",
        action="store_const",
        const=SILENT_LOG_LEVEL,
        dest="log_level",
        help="Do not show warnings, only errors.",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )

    general.add_argument(
        "-I",
        "--include-dir",
        action="append",
        default=[],
        metavar="FOLDER",
        dest="include_dirs",
        help="Add an include path for the compiler. May be specified multiple times.",
    )
    general.add_argument(
        "--no-css",
        action="store_true",
        help="Do not write the compiled CSS.",
    )
    general.add_argument(
        "--output-style",
        choices=OUTPUT_STYLES,
        default=DEFAULT_OUTPUT_STYLE,
        help=f"CSS output style (default: {DEFAULT_OUTPUT_STYLE}).",
    )

    # --- Source maps ---
    source_map = parser.add_argument_group("Source map generation")
    source_map.add_argument(
        "--source-map",
        nargs="?",
        const=None,
        default=ABSENT,
        metavar="PATH",
        help=(
            "Generate a source map file ('-' for standard output). "
            "Without a path it is written next to the CSS file."
        ),
    )
    source_map.add_argument(
        "--source-map-inline",
        action="store_true",
        help="Generate an in-line source map.",
    )
    source_map.add_argument(
        "--source-map-include-source",
        action="store_true",
        help="Include the sources in the source map.",
    )
    source_map.add_argument(
        "--source-map-root",
        metavar="PATH",
        help=(
            "Root path of the sources, relative to the location of the "
            "source map (calculated automatically if not specified)."
        ),
    )
    source_map.add_argument(
        "--source-map-base",
        metavar="PATH",
        help=(
            "Base path to use when forming the relative path to the source "
            "map in generated CSS output (defaults to the CSS output directory)."
        ),
    )
    source_map.add_argument(
        "--source-map-url",
        metavar="URL",
        help="URL or path where the source map can be retrieved, relative to the output CSS.",
    )

    # --- Dependency tracking ---
    depends = parser.add_argument_group("Dependency tracking")
    depends.add_argument(
        "-d",
        "--depends",
        nargs="?",
        const=None,
        default=ABSENT,
        metavar="PATH",
        help=(
            "Write dependency information to the given file ('-' for standard "
            "output). If the path is omitted, it is created next to the CSS file."
        ),
    )
    depends.add_argument(
        "-p",
        "--depends-phony",
        action="store_true",
        help=(
            "Add a phony target for each dependency to prevent errors "
            "if the dependency is deleted."
        ),
    )
    depends.add_argument(
        "-t",
        "--depends-target",
        nargs="?",
        const="",
        default=None,
        metavar="TARGET",
        help=(
            "Manually specify the target for the generated dependencies. "
            "Needed if CSS output is written to stdout."
        ),
    )
    return parser


def _build_raw_options(args: argparse.Namespace) -> RawOptions:
    """Check positional arity and pack the namespace into RawOptions."""
    if args.source is None:
        xmsg = "missing required parameter: SOURCE"
        raise UsageError(xmsg)
    if args.no_css and args.dest is not None:
        xmsg = f"unexpected DEST {args.dest!r}: no CSS is written with --no-css"
        raise UsageError(xmsg)
    if not args.no_css and args.dest is None:
        xmsg = "missing required parameter: DEST (or alternatively --no-css)"
        raise UsageError(xmsg)

    return RawOptions(
        source=args.source,
        dest=args.dest,
        no_css=args.no_css,
        include_dirs=tuple(args.include_dirs),
        source_map=args.source_map,
        source_map_inline=args.source_map_inline,
        source_map_include_source=args.source_map_include_source,
        source_map_root=args.source_map_root,
        source_map_base=args.source_map_base,
        source_map_url=args.source_map_url,
        depends=args.depends,
        depends_phony=args.depends_phony,
        depends_target=args.depends_target,
        output_style=args.output_style,
    )


def _initialize_logger(args: argparse.Namespace) -> None:
    """Initialize logger with CLI args, env vars, and defaults."""
    logger = get_app_logger()
    logger.setLevel(logger.determine_log_level(args=args))
    logger.enable_color = logger.determine_color_enabled()
    logger.trace("[BOOT] log-level initialized: %s", logger.level_name)

    logger.debug(
        "Runtime: Python %s (%s)",
        platform.python_version(),
        platform.python_implementation(),
    )


def _print_usage_error(parser: argparse.ArgumentParser, message: str) -> None:
    parser.print_usage(sys.stderr)
    sys.stderr.write(f"{parser.prog}: error: {message}\n")


def _log_config(config: ResolvedConfig) -> None:
    logger = get_app_logger()
    logger.debug("Source: %s", config.source)
    logger.debug("CSS output: %s", config.dest)
    if config.source_map is not None:
        sm = config.source_map
        where = "inline" if sm.inline else str(sm.destination)
        logger.debug("Source map: %s (root=%r, base=%s)", where, sm.root, sm.base)
    if config.depends is not None:
        logger.debug(
            "Dependency file: %s (target=%r, phony=%s)",
            config.depends.destination,
            config.depends.target,
            config.depends.phony,
        )


def _run(config: ResolvedConfig) -> None:
    logger = get_app_logger()
    _log_config(config)

    source_text = read_source(config.source)
    result = compile_stylesheet(config, source_text, logger=logger)
    write_outputs(plan_outputs(config, result), config.cwd)

    if isinstance(config.dest, FilePath):
        logger.debug("Compiled %s", config.dest.path)


def _report_failure(logger: AppLogger, level: int, msg: str) -> None:
    """Log a fatal message; below --log-level it still reaches stderr."""
    if logger.isEnabledFor(level):
        if level >= logging.CRITICAL:
            logger.critical_if_not_debug(msg)
        else:
            logger.error_if_not_debug(msg)
        return
    _color, tag = TAG_STYLES[logging.getLevelName(level)]
    safe_log(f"{tag} {msg}")


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    logger = get_app_logger()  # init (use env + defaults)
    parser = _setup_parser()

    # --- Usage errors: printed with the usage line ---
    try:
        args = parser.parse_args(argv)
        if args.help:
            parser.print_help(sys.stderr)
            return 0
        _initialize_logger(args)
        if args.version:
            logger.info("%s %s", PROGRAM_DISPLAY, get_version())
            return 0
        raw = _build_raw_options(args)
    except UsageError as e:
        _print_usage_error(parser, str(e))
        return 1

    try:
        config = resolve_options(raw, Path.cwd())
        if isinstance(config, ResolutionError):
            raise config
        _run(config)

    except (ResolutionError, CompileError, OSError) as e:
        # controlled termination
        try:
            _report_failure(logger, logging.ERROR, str(e))
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return 1

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            _report_failure(logger, logging.CRITICAL, f"Unexpected internal error: {e}")
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return 1

    else:
        return 0


def main_entry() -> None:
    """Console-script entry point."""
    sys.exit(main())
