# src/sass_make/outputs.py

import os
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .compiler import CompileResult
from .depends import generate_depends
from .logs import get_app_logger
from .options_types import FilePath, Location, ResolvedConfig, Suppressed


def _absolute(location: FilePath, cwd: Path) -> Path:
    return Path(os.path.normpath(cwd / location.path))


def read_source(location: Location) -> str | None:
    """Return stdin's text, or None for a file source (libsass reads it)."""
    if isinstance(location, FilePath):
        return None
    return sys.stdin.read()


def write_output(location: Location, data: str, cwd: Path) -> None:
    """Write `data` to stdout or to a file, creating parent directories."""
    logger = get_app_logger()
    if not isinstance(location, FilePath):
        sys.stdout.write(data)
        sys.stdout.flush()
        logger.trace("[WRITE] %d byte(s) to standard output", len(data))
        return

    path = _absolute(location, cwd)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data, encoding="utf-8")
    logger.debug("Wrote %s", location.path)


def plan_outputs(
    config: ResolvedConfig,
    result: CompileResult,
) -> list[tuple[Location, str]]:
    """Pair every enabled output channel with the text it receives."""
    plan: list[tuple[Location, str]] = []

    if not isinstance(config.dest, Suppressed):
        plan.append((config.dest, result.css + "\n"))

    sm = config.source_map
    if sm is not None and sm.destination is not None:
        data = result.source_map + "\n" if result.source_map else ""
        plan.append((sm.destination, data))

    dep = config.depends
    if dep is not None:
        text = generate_depends(dep.target, result.imports, dep.phony)
        plan.append((dep.destination, text))

    return plan


def write_outputs(plan: list[tuple[Location, str]], cwd: Path) -> None:
    """Write every planned output concurrently and wait for all of them.

    Destinations are distinct (at most one is stdout), so the writes do not
    interfere. The first failure is re-raised once all writers finished.
    """
    if not plan:
        return
    with ThreadPoolExecutor(max_workers=len(plan)) as executor:
        futures = [
            executor.submit(write_output, location, data, cwd)
            for location, data in plan
        ]
    for future in futures:
        future.result()
